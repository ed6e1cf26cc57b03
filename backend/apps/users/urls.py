from django.urls import path
from .views import (
    RegisterView, LoginView, CookieTokenRefreshView, LogoutView,
    UserDetailView, ChangePasswordView, OAuthLoginView, UserListView,
    current_user
)

urlpatterns = [
    path('register/', RegisterView.as_view(), name='register'),
    path('login/', LoginView.as_view(), name='token_obtain_pair'),
    path('refresh/', CookieTokenRefreshView.as_view(), name='token_refresh'),
    path('logout/', LogoutView.as_view(), name='logout'),
    path('me/', current_user, name='current_user'),
    path('profile/', UserDetailView.as_view(), name='user_profile'),
    path('change-password/', ChangePasswordView.as_view(), name='change_password'),
    path('oauth-login/', OAuthLoginView.as_view(), name='oauth_login'),
    path('users/', UserListView.as_view(), name='user_list'),
]
