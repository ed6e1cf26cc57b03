import logging

from django.db.models import F, Q
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from sitebuilder_backend.exceptions import ApiError
from .models import Theme
from .permissions import ThemeAccessPermission
from .serializers import ThemeSerializer, ThemeListSerializer

logger = logging.getLogger(__name__)


class ThemeViewSet(viewsets.ModelViewSet):
    """
    Theme catalogue. Listing shows public themes; users can create their own.
    """
    permission_classes = [IsAuthenticatedOrReadOnly, ThemeAccessPermission]

    def get_serializer_class(self):
        if self.action in ('list', 'category', 'my_themes'):
            return ThemeListSerializer
        return ThemeSerializer

    def get_queryset(self):
        if self.action != 'list':
            return Theme.objects.all()

        queryset = Theme.objects.filter(is_public=True)
        params = self.request.query_params

        category = params.get('category')
        if category:
            queryset = queryset.filter(category=category)

        is_premium = params.get('is_premium')
        if is_premium is not None:
            queryset = queryset.filter(is_premium=is_premium.lower() == 'true')

        search = params.get('search')
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(description__icontains=search))

        return queryset

    def perform_create(self, serializer):
        theme = serializer.save(created_by=self.request.user)
        logger.info(f"Theme '{theme.name}' created by {self.request.user.email}")

    def _paginated(self, queryset):
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=False, methods=['get'], permission_classes=[AllowAny],
            url_path=r'category/(?P<category>[a-z]+)')
    def category(self, request, category=None):
        """Public themes in one category"""
        if category not in dict(Theme.CATEGORY_CHOICES):
            raise ApiError(f'Unknown theme category: {category}', status.HTTP_400_BAD_REQUEST)
        return self._paginated(Theme.objects.filter(is_public=True, category=category))

    @action(detail=True, methods=['post'], permission_classes=[ThemeAccessPermission])
    def use(self, request, pk=None):
        """Record that a site picked this theme"""
        theme = self.get_object()
        Theme.objects.filter(pk=theme.pk).update(usage_count=F('usage_count') + 1)
        theme.refresh_from_db(fields=['usage_count'])
        return Response(ThemeSerializer(theme).data)

    @action(detail=False, methods=['get'], permission_classes=[IsAuthenticated], url_path='my-themes')
    def my_themes(self, request):
        return self._paginated(Theme.objects.filter(created_by=request.user))
