"""
JWT authentication that accepts the Bearer header or the HttpOnly auth cookie.
"""
import logging

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.settings import api_settings as jwt_settings

logger = logging.getLogger(__name__)


class CookieJWTAuthentication(JWTAuthentication):
    """
    Reads `Authorization: Bearer <token>` first, then the `token` /
    `access_token` cookies. A bad header token is a 401; a bad cookie is
    ignored and the request continues anonymously.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
            if raw_token is None:
                return None
            validated_token = self.get_validated_token(raw_token)
            return self.get_user(validated_token), validated_token

        raw_token = self.get_cookie_token(request)
        if raw_token is None:
            return None

        try:
            validated_token = self.get_validated_token(raw_token)
            return self.get_user(validated_token), validated_token
        except AuthenticationFailed as e:
            logger.debug(f"Ignoring invalid auth cookie: {e}")
            return None

    def get_cookie_token(self, request):
        for name in settings.AUTH_COOKIE_NAMES:
            value = request.COOKIES.get(name)
            if value:
                return value
        return None


def set_auth_cookies(response, access, refresh=None):
    """Attach the access (and refresh) token as HttpOnly cookies."""
    response.set_cookie(
        settings.AUTH_COOKIE_ACCESS,
        access,
        max_age=int(jwt_settings.ACCESS_TOKEN_LIFETIME.total_seconds()),
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite=settings.AUTH_COOKIE_SAMESITE,
    )
    if refresh:
        response.set_cookie(
            settings.AUTH_COOKIE_REFRESH,
            refresh,
            max_age=int(jwt_settings.REFRESH_TOKEN_LIFETIME.total_seconds()),
            httponly=True,
            secure=settings.AUTH_COOKIE_SECURE,
            samesite=settings.AUTH_COOKIE_SAMESITE,
        )
    return response


def clear_auth_cookies(response):
    for name in (*settings.AUTH_COOKIE_NAMES, settings.AUTH_COOKIE_REFRESH):
        response.delete_cookie(name, samesite=settings.AUTH_COOKIE_SAMESITE)
    return response
