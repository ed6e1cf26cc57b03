"""
API error type and the DRF exception handler that renders every failure as
{"success": false, "message": ...}.
"""
import logging

from django.conf import settings
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ApiError(APIException):
    """
    Domain error raised by views and services.

    `extra` keys are merged into the error body next to `success`/`message`.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Server Error'
    default_code = 'error'

    def __init__(self, message=None, status_code=None, **extra):
        super().__init__(detail=message)
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra


def _first_message(data) -> str:
    """Pull a single human readable message out of DRF error data."""
    if isinstance(data, dict):
        if 'detail' in data:
            return str(data['detail'])
        for key, value in data.items():
            message = _first_message(value)
            if message:
                if key == 'non_field_errors':
                    return message
                return f"{key}: {message}"
        return ''
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ''
    return str(data) if data is not None else ''


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__}: {exc}")
        message = str(exc) if settings.DEBUG else 'Server Error'
        return Response(
            {'success': False, 'message': message},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, Http404):
        message = 'Resource not found'
    else:
        message = _first_message(response.data)

    payload = {'success': False, 'message': message}
    if isinstance(exc, ValidationError):
        payload['errors'] = response.data
    if isinstance(exc, ApiError):
        payload.update(exc.extra)

    if response.status_code >= 500:
        logger.error(f"API error {response.status_code}: {message}")

    response.data = payload
    return response
