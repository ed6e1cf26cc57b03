from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import ThemeViewSet

router = SimpleRouter()
router.register(r'', ThemeViewSet, basename='theme')

urlpatterns = [
    path('', include(router.urls)),
]
