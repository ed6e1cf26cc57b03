"""
URL configuration for sitebuilder_backend project.
"""
from django.contrib import admin
from django.urls import path, re_path, include
from django.conf import settings
from django.views.static import serve

from .views import api_root, health_check

handler404 = 'sitebuilder_backend.views.not_found'
handler500 = 'sitebuilder_backend.views.server_error'

urlpatterns = [
    path('', api_root, name='api_root'),
    path('api/health/', health_check, name='health_check'),
    path('admin/', admin.site.urls),
    path('api/auth/', include('apps.users.urls')),
    path('api/oauth/', include('apps.oauth.urls')),  # Identity provider proxy
    path('api/pages/', include('apps.editor.urls')),  # Editor sessions per page
    path('api/', include('apps.sites.urls')),  # Sites and pages
    path('api/themes/', include('apps.themes.urls')),
    path('api/templates/', include('apps.templates.urls')),
    path('api/assets/', include('apps.assets.urls')),
    path('site/', include('apps.renderer.urls')),  # Published sites

    # Uploaded files
    re_path(r'^uploads/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
]
