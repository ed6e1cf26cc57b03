import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.sites.models import Page
from sitebuilder_backend.exceptions import ApiError
from .schema import SchemaError, normalize_sections
from .sessions import EditorSessionStore
from .store import EditorError

logger = logging.getLogger(__name__)


class EditorView(APIView):
    """
    Editing session for one page, owner only.

    GET opens or resumes the session, DELETE discards it. The `action`
    kwarg set in urls.py routes POSTs to operations, undo, redo and save.
    """
    permission_classes = [IsAuthenticated]

    def get_page(self, page_id):
        return get_object_or_404(
            Page.objects.select_related('site'), pk=page_id, site__user=self.request.user
        )

    def get_store(self):
        return EditorSessionStore(self.request.user.id)

    def get(self, request, page_id):
        page = self.get_page(page_id)
        state = self.get_store().load(page)
        return Response(state.summary())

    def delete(self, request, page_id):
        page = self.get_page(page_id)
        self.get_store().discard(page.pk)
        return Response({'success': True, 'message': 'Editor session discarded'})

    def post(self, request, page_id, action=None):
        page = self.get_page(page_id)
        store = self.get_store()
        state = store.load(page)

        if action == 'operations':
            operations = request.data.get('operations')
            try:
                state.apply_all(operations)
            except (SchemaError, EditorError) as e:
                raise ApiError(str(e), status.HTTP_400_BAD_REQUEST)

        elif action == 'undo':
            state.undo()

        elif action == 'redo':
            state.redo()

        elif action == 'save':
            try:
                page.sections = normalize_sections(state.sections)
            except SchemaError as e:
                raise ApiError(str(e), status.HTTP_400_BAD_REQUEST)
            page.save(update_fields=['sections', 'updated_at'])
            page.site.touch()
            state.sections = page.sections
            state.mark_saved()
            logger.info(f"Editor session saved to page {page.pk}")

        else:
            raise ApiError('Unknown editor action', status.HTTP_404_NOT_FOUND)

        store.save(state)
        return Response(state.summary())
