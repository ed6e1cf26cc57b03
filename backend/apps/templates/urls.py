from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import SiteTemplateViewSet

router = SimpleRouter()
router.register(r'', SiteTemplateViewSet, basename='site-template')

urlpatterns = [
    path('', include(router.urls)),
]
