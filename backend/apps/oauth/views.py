"""
Identity provider proxy.

The browser never talks to the identity provider directly; these views
forward each step of the OAuth flow and relay the upstream answer. Errors
keep the upstream-compatible shape {"error": "<step> failed", "details": ...}.
"""
import logging

from django.conf import settings
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.users.models import User
from apps.users.services import link_oauth_user
from sitebuilder_backend.exceptions import ApiError
from .client import IdentityProviderClient, IdentityProviderError

logger = logging.getLogger(__name__)


class OAuthUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'avatar', 'subscription_plan', 'oauth_provider']


def proxy_error(operation, error):
    return Response(
        {'error': f'{operation} failed', 'details': error.details},
        status=error.status_code
    )


class IdentityProviderView(APIView):
    """Base for the pass-through endpoints"""
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_client(self):
        return IdentityProviderClient()


class TokenView(IdentityProviderView):
    """Exchange the authorization code for an access token"""

    def post(self, request):
        code = request.data.get('code')
        if not code:
            return Response({'error': 'Authorization code is required'}, status=status.HTTP_400_BAD_REQUEST)

        try:
            data = self.get_client().exchange_code(
                code, request.data.get('state'), request.data.get('client_id')
            )
        except IdentityProviderError as e:
            return proxy_error('Token generation', e)

        logger.info('Token generation successful')
        return Response(data)


class UserInfoView(IdentityProviderView):

    def post(self, request):
        try:
            data = self.get_client().get_user_info(
                request.data.get('access_token'), request.data.get('uid')
            )
        except IdentityProviderError as e:
            return proxy_error('User info fetch', e)
        return Response(data)


class ProfileView(IdentityProviderView):

    def post(self, request):
        try:
            data = self.get_client().get_profile(
                request.data.get('access_token'), request.data.get('uid')
            )
        except IdentityProviderError as e:
            if e.status_code == status.HTTP_404_NOT_FOUND:
                return Response({'error': 'Profile not found'}, status=status.HTTP_404_NOT_FOUND)
            return proxy_error('User profile fetch', e)
        return Response(data)


class UpdateProfileView(IdentityProviderView):

    def post(self, request):
        data = request.data
        try:
            result = self.get_client().update_profile(
                uid=data.get('uid'),
                first_name=data.get('first_name'),
                last_name=data.get('last_name'),
                email=data.get('email'),
                mobileno=data.get('mobileno'),
                mode=data.get('mode'),
            )
        except IdentityProviderError as e:
            return proxy_error('Profile update', e)

        logger.info(f"Profile updated upstream for uid {data.get('uid')}")
        return Response(result)


class ProviderLogoutView(IdentityProviderView):
    """End the session at the identity provider"""

    def post(self, request):
        user_id = request.data.get('user_id')
        if not user_id:
            return Response(
                {'status': 0, 'error': 'Missing user_id', 'status_code': 400},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            data = self.get_client().logout(user_id)
        except IdentityProviderError as e:
            details = e.details if isinstance(e.details, dict) else {}
            if e.status_code == 400 and 'invalid_grant' in (details.get('errors'), details.get('error')):
                # Session already gone upstream
                logger.info(f"Upstream session for {user_id} already invalid")
                return Response(details)
            return Response({
                'status': 0,
                'error': 'Logout failed',
                'details': e.details,
                'status_code': e.status_code,
            }, status=e.status_code)

        message = data.get('message') if isinstance(data, dict) else None
        return Response({
            'status': 1,
            'message': message or 'Logout successful',
            'status_code': 200,
        })


class SyncUserView(APIView):
    """Create or update the local account for an identity provider profile"""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        user_info = request.data.get('userInfo') or request.data.get('user_info') or request.data
        if not isinstance(user_info, dict) or not user_info.get('uid') or not user_info.get('email'):
            raise ApiError('Missing required fields: uid and email', status.HTTP_400_BAD_REQUEST)

        access_token = (
            request.data.get('accessToken') or request.data.get('access_token')
            or user_info.get('access_token') or ''
        )

        provider = user_info.get('oauth_provider') or settings.OAUTH_PROVIDER_NAME
        # Roles only change through oauth-login
        profile = {key: value for key, value in user_info.items() if key != 'role'}
        user, created = link_oauth_user(profile, access_token, provider=provider)

        return Response({
            'success': True,
            'created': created,
            'user': OAuthUserSerializer(user).data,
        })


class OAuthUserView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, uid):
        provider = request.query_params.get('oauth_provider') or settings.OAUTH_PROVIDER_NAME
        user = User.objects.filter(oauth_provider=provider, oauth_uid=uid).first()
        if user is None:
            raise ApiError('User not found', status.HTTP_404_NOT_FOUND)
        return Response({'success': True, 'user': OAuthUserSerializer(user).data})


class DisconnectView(APIView):
    """Unlink the identity provider from the current account"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        user = request.user
        if not user.oauth_provider:
            raise ApiError('No OAuth provider connected to this account', status.HTTP_400_BAD_REQUEST)

        user.oauth_provider = ''
        user.oauth_uid = None
        user.oauth_access_token = ''
        user.save(update_fields=['oauth_provider', 'oauth_uid', 'oauth_access_token', 'updated_at'])
        logger.info(f"OAuth disconnected for {user.email}")

        return Response({'success': True, 'message': 'OAuth disconnected successfully'})
