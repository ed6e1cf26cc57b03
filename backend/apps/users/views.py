import logging

from django.conf import settings
from django.contrib.auth.models import update_last_login
from django.db.models import Q
from rest_framework import generics, status
from rest_framework.decorators import api_view
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from sitebuilder_backend.exceptions import ApiError
from .authentication import set_auth_cookies, clear_auth_cookies
from .models import User
from .permissions import IsAdminRole
from .serializers import (
    UserSerializer, RegisterSerializer, ChangePasswordSerializer,
    SiteBuilderTokenObtainPairSerializer
)
from .services import link_oauth_user

logger = logging.getLogger(__name__)


def token_response(user, status_code=status.HTTP_200_OK, **extra):
    """Issue a token pair for `user` and return it in the body and as cookies."""
    refresh = SiteBuilderTokenObtainPairSerializer.get_token(user)
    access = str(refresh.access_token)
    response = Response({
        'success': True,
        'user': UserSerializer(user).data,
        'access': access,
        'refresh': str(refresh),
        **extra,
    }, status=status_code)
    return set_auth_cookies(response, access, str(refresh))


class RegisterView(generics.CreateAPIView):
    queryset = User.objects.all()
    permission_classes = [AllowAny]
    serializer_class = RegisterSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Registered user {user.email}")
        return token_response(user, status.HTTP_201_CREATED, message='User registered successfully')


class LoginView(TokenObtainPairView):
    serializer_class = SiteBuilderTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        return set_auth_cookies(response, response.data['access'], response.data.get('refresh'))


class CookieTokenRefreshView(TokenRefreshView):
    """Refresh from the request body or the refresh cookie."""

    def post(self, request, *args, **kwargs):
        data = {'refresh': request.data.get('refresh') or request.COOKIES.get(settings.AUTH_COOKIE_REFRESH)}
        if not data['refresh']:
            raise ApiError('Refresh token is required', status.HTTP_400_BAD_REQUEST)

        serializer = self.get_serializer(data=data)
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            raise InvalidToken(e.args[0])

        response = Response(serializer.validated_data, status=status.HTTP_200_OK)
        return set_auth_cookies(
            response,
            serializer.validated_data['access'],
            serializer.validated_data.get('refresh')
        )


class LogoutView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        refresh = request.data.get('refresh') or request.COOKIES.get(settings.AUTH_COOKIE_REFRESH)
        if refresh:
            try:
                RefreshToken(refresh).blacklist()
            except TokenError as e:
                logger.info(f"Logout with unusable refresh token: {e}")

        response = Response({'success': True, 'message': 'Logged out successfully'})
        return clear_auth_cookies(response)


@api_view(['GET'])
def current_user(request):
    """Get current authenticated user"""
    serializer = UserSerializer(request.user)
    return Response(serializer.data)


class UserDetailView(generics.RetrieveUpdateAPIView):
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user


class ChangePasswordView(generics.UpdateAPIView):
    serializer_class = ChangePasswordSerializer
    permission_classes = [IsAuthenticated]

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.set_password(serializer.validated_data['new_password'])
        user.save(update_fields=['password', 'updated_at'])
        return Response({'success': True, 'message': 'Password updated successfully'})


class OAuthLoginView(APIView):
    """
    Sign in with a profile fetched from the identity provider.
    Only admin roles may use the builder.
    """
    permission_classes = [AllowAny]

    def post(self, request):
        user_info = request.data.get('userInfo') or request.data.get('user_info') or {}
        access_token = request.data.get('accessToken') or request.data.get('access_token') or ''
        user_profile = request.data.get('userProfile') or request.data.get('user_profile')

        if not isinstance(user_info, dict) or not user_info.get('uid'):
            raise ApiError('User info with uid is required', status.HTTP_400_BAD_REQUEST)

        role = user_info.get('role') or 'user'
        if role not in User.ADMIN_ROLES:
            logger.warning(f"OAuth login denied for uid {user_info.get('uid')} with role {role}")
            raise ApiError(
                'You do not have permission to access this application. '
                'Only administrators are allowed.',
                status.HTTP_403_FORBIDDEN,
                error='access_denied',
                role=role,
            )

        user, created = link_oauth_user(user_info, access_token, profile=user_profile)
        if not user.is_active:
            raise ApiError('Account is deactivated', status.HTTP_401_UNAUTHORIZED)

        update_last_login(None, user)
        return token_response(user, created=created, message='Login successful')


class UserListView(generics.ListAPIView):
    """Admin listing of all users"""
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get_queryset(self):
        queryset = User.objects.all()
        role = self.request.query_params.get('role')
        search = self.request.query_params.get('search')
        if role:
            queryset = queryset.filter(role=role)
        if search:
            queryset = queryset.filter(
                Q(email__icontains=search)
                | Q(username__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
            )
        return queryset
