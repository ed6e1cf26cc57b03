import logging

from django.db.models import F
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny

from apps.editor.schema import normalize_sections
from apps.sites import services as site_services
from apps.sites.models import Site
from apps.sites.serializers import SiteSerializer
from sitebuilder_backend.exceptions import ApiError
from .models import SiteTemplate
from .serializers import SiteTemplateSerializer, SiteTemplateListSerializer, UseTemplateSerializer

logger = logging.getLogger(__name__)


class SiteTemplateViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for browsing site templates
    """
    queryset = SiteTemplate.objects.filter(is_active=True)
    permission_classes = [AllowAny]
    lookup_field = 'slug'

    def get_serializer_class(self):
        if self.action == 'list':
            return SiteTemplateListSerializer
        return SiteTemplateSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        category = self.request.query_params.get('category')
        if category:
            queryset = queryset.filter(category=category)
        return queryset

    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def use_template(self, request, slug=None):
        """
        Create a new site whose home page starts from this template
        """
        template = self.get_object()
        serializer = UseTemplateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        site_name = serializer.validated_data['site_name'].strip()
        subdomain = serializer.validated_data.get('subdomain') or Site.generate_unique_subdomain(site_name)

        try:
            site = site_services.create_site(
                request.user,
                {'site_name': site_name, 'subdomain': subdomain},
                home_sections=normalize_sections(template.sections),
            )
        except ValueError as e:
            raise ApiError(str(e), status.HTTP_400_BAD_REQUEST)

        SiteTemplate.objects.filter(pk=template.pk).update(usage_count=F('usage_count') + 1)
        logger.info(f"Site '{site.subdomain}' created from template '{template.slug}'")

        return Response(SiteSerializer(site).data, status=status.HTTP_201_CREATED)
