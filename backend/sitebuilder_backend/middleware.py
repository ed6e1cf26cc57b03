import logging
import time

from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(MiddlewareMixin):
    """
    Logs one line per request with method, path, status and duration.
    """

    def process_request(self, request):
        request._request_started_at = time.monotonic()
        return None

    def process_response(self, request, response):
        started = getattr(request, '_request_started_at', None)
        duration_ms = (time.monotonic() - started) * 1000 if started else 0.0
        line = f"{request.method} {request.get_full_path()} {response.status_code} {duration_ms:.1f}ms"

        if response.status_code >= 500:
            logger.error(line)
        elif response.status_code >= 400:
            logger.warning(line)
        else:
            logger.info(line)
        return response
