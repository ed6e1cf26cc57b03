"""
Editor sessions: one EditorState per (user, page), kept in the Django cache
between requests.
"""
import logging

from django.conf import settings
from django.core.cache import cache

from .store import EditorState

logger = logging.getLogger(__name__)


class EditorSessionStore:
    """Load, persist and discard editor states for one user."""

    def __init__(self, user_id):
        self.user_id = user_id

    def key(self, page_id):
        return f"editor_session_{self.user_id}_{page_id}"

    def get(self, page_id):
        data = cache.get(self.key(page_id))
        if data is None:
            return None
        return EditorState.from_dict(data)

    def load(self, page):
        """Resume the stored session for `page` or open a fresh one."""
        state = self.get(page.pk)
        if state is None:
            state = EditorState().load_page(page)
            self.save(state)
            logger.info(f"Editor session opened for page {page.pk} by user {self.user_id}")
        return state

    def save(self, state):
        cache.set(self.key(state.page_id), state.to_dict(), timeout=settings.EDITOR_SESSION_TIMEOUT)

    def discard(self, page_id):
        cache.delete(self.key(page_id))
        logger.info(f"Editor session discarded for page {page_id} by user {self.user_id}")
