from django.urls import path

from . import views

urlpatterns = [
    path('token/', views.TokenView.as_view(), name='oauth-token'),
    path('userinfo/', views.UserInfoView.as_view(), name='oauth-userinfo'),
    path('profile/', views.ProfileView.as_view(), name='oauth-profile'),
    path('update-profile/', views.UpdateProfileView.as_view(), name='oauth-update-profile'),
    path('logout/', views.ProviderLogoutView.as_view(), name='oauth-logout'),
    path('sync-user/', views.SyncUserView.as_view(), name='oauth-sync-user'),
    path('user/<str:uid>/', views.OAuthUserView.as_view(), name='oauth-user'),
    path('disconnect/', views.DisconnectView.as_view(), name='oauth-disconnect'),
]
