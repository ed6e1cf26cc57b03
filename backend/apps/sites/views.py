import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView

from sitebuilder_backend.exceptions import ApiError
from . import services
from .models import Site, Page
from .serializers import (
    SiteSerializer, SiteListSerializer, SiteCreateSerializer, PublicSiteSerializer,
    PageSerializer, PageContentSerializer
)

logger = logging.getLogger(__name__)


class SiteViewSet(viewsets.ModelViewSet):
    """
    ViewSet for managing sites.
    Sites are scoped to their owner; `?subdomain=` lists published sites publicly.
    """
    permission_classes = [IsAuthenticated]

    @property
    def public_subdomain(self):
        if self.action != 'list':
            return None
        subdomain = self.request.query_params.get('subdomain')
        return subdomain.strip().lower() if subdomain else None

    def get_permissions(self):
        if self.public_subdomain:
            return [AllowAny()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.action == 'list':
            return PublicSiteSerializer if self.public_subdomain else SiteListSerializer
        elif self.action == 'create':
            return SiteCreateSerializer
        return SiteSerializer

    def get_queryset(self):
        """Published sites by subdomain, otherwise the caller's own sites"""
        if self.public_subdomain:
            return Site.objects.filter(
                subdomain=self.public_subdomain, is_published=True
            ).select_related('theme')

        queryset = Site.objects.filter(user=self.request.user).select_related('theme')
        if self.action == 'list':
            params = self.request.query_params
            search = params.get('search')
            if search:
                queryset = queryset.filter(site_name__icontains=search)
            is_published = params.get('is_published')
            if is_published is not None:
                queryset = queryset.filter(is_published=is_published.lower() == 'true')
            queryset = queryset.order_by('-updated_at')
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            site = services.create_site(request.user, serializer.validated_data)
        except ValueError as e:
            raise ApiError(str(e), status.HTTP_400_BAD_REQUEST)

        return Response(SiteSerializer(site).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        # Updates always merge into the stored site
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)

    def perform_update(self, serializer):
        serializer.save(last_edited_at=timezone.now())

    def destroy(self, request, *args, **kwargs):
        site = self.get_object()
        logger.info(f"Deleting site '{site.subdomain}' and {site.pages.count()} pages")
        site.delete()
        return Response({'success': True, 'message': 'Site and all its pages deleted successfully'})

    @action(detail=True, methods=['post'])
    def publish(self, request, pk=None):
        """Publish the site at its subdomain"""
        site = self.get_object()
        try:
            services.publish_site(site)
        except ValueError as e:
            raise ApiError(str(e), status.HTTP_400_BAD_REQUEST)
        return Response(SiteSerializer(site).data)

    @action(detail=True, methods=['post'])
    def unpublish(self, request, pk=None):
        site = self.get_object()
        services.unpublish_site(site)
        return Response(SiteSerializer(site).data)

    @action(detail=True, methods=['post'])
    def duplicate(self, request, pk=None):
        """Copy the site with all of its pages"""
        site = self.get_object()
        try:
            copy_site = services.duplicate_site(site, request.user)
        except ValueError as e:
            raise ApiError(str(e), status.HTTP_400_BAD_REQUEST)
        return Response(SiteSerializer(copy_site).data, status=status.HTTP_201_CREATED)


class SitePagesView(generics.ListCreateAPIView):
    """
    Pages of a site. The owner sees every page; anyone else sees the
    visible pages of a published site.
    """
    serializer_class = PageSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    pagination_class = None

    def get_site(self):
        site = get_object_or_404(Site, pk=self.kwargs['site_id'])
        user = self.request.user
        if user.is_authenticated and site.user_id == user.id:
            return site
        if self.request.method == 'GET' and site.is_published:
            return site
        raise ApiError('Site not found', status.HTTP_404_NOT_FOUND)

    def get_queryset(self):
        site = self.get_site()
        queryset = site.pages.order_by('order', 'created_at')
        if site.user_id != self.request.user.id:
            queryset = queryset.filter(is_visible=True)
        return queryset

    def create(self, request, *args, **kwargs):
        site = self.get_site()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        page = services.create_page(site, serializer.validated_data)
        return Response(PageSerializer(page).data, status=status.HTTP_201_CREATED)


class SitePageReorderView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, site_id):
        site = get_object_or_404(Site, pk=site_id, user=request.user)
        page_orders = request.data.get('page_orders', request.data.get('pageOrders'))

        try:
            pages = services.reorder_pages(site, page_orders)
        except ValueError as e:
            raise ApiError(str(e), status.HTTP_400_BAD_REQUEST)

        return Response(PageSerializer(pages, many=True).data)


class PageViewSet(mixins.RetrieveModelMixin,
                  mixins.UpdateModelMixin,
                  mixins.DestroyModelMixin,
                  viewsets.GenericViewSet):
    """
    Single page operations. Reading is allowed for visible pages of
    published sites; every change needs the site owner.
    """
    serializer_class = PageSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get_queryset(self):
        queryset = Page.objects.select_related('site')
        user = self.request.user

        if self.action == 'retrieve':
            public = Q(site__is_published=True, is_visible=True)
            if user.is_authenticated:
                return queryset.filter(public | Q(site__user=user))
            return queryset.filter(public)
        return queryset.filter(site__user=user)

    def update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)

    def perform_update(self, serializer):
        page = serializer.save()
        page.site.touch()

    def destroy(self, request, *args, **kwargs):
        page = self.get_object()
        try:
            services.delete_page(page)
        except ValueError as e:
            raise ApiError(str(e), status.HTTP_400_BAD_REQUEST)
        return Response({'success': True, 'message': 'Page deleted successfully'})

    @action(detail=True, methods=['patch'])
    def content(self, request, pk=None):
        """Replace the page body (sections and/or legacy content)"""
        page = self.get_object()
        serializer = PageContentSerializer(page, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        page.site.touch()
        return Response(PageSerializer(page).data)

    @action(detail=True, methods=['post'])
    def duplicate(self, request, pk=None):
        page = self.get_object()
        new_page = services.duplicate_page(page)
        return Response(PageSerializer(new_page).data, status=status.HTTP_201_CREATED)
