from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import SiteViewSet, PageViewSet, SitePagesView, SitePageReorderView

router = SimpleRouter()
router.register(r'sites', SiteViewSet, basename='site')
router.register(r'pages', PageViewSet, basename='page')

urlpatterns = [
    path('sites/<int:site_id>/pages/', SitePagesView.as_view(), name='site-pages'),
    path('sites/<int:site_id>/pages/reorder/', SitePageReorderView.as_view(), name='site-pages-reorder'),
    path('', include(router.urls)),
]
