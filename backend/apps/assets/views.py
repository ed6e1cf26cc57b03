import logging

from django.db.models import Q
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from sitebuilder_backend.exceptions import ApiError
from .models import Asset
from .serializers import AssetSerializer, AssetUpdateSerializer, AssetUploadSerializer
from .services import AssetService

logger = logging.getLogger(__name__)


class AssetViewSet(mixins.ListModelMixin,
                   mixins.RetrieveModelMixin,
                   mixins.UpdateModelMixin,
                   mixins.DestroyModelMixin,
                   viewsets.GenericViewSet):
    """
    Uploaded files of the current user.
    """
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def get_serializer_class(self):
        if self.action in ('update', 'partial_update'):
            return AssetUpdateSerializer
        return AssetSerializer

    def get_queryset(self):
        queryset = Asset.objects.filter(user=self.request.user)
        if self.action != 'list':
            return queryset

        params = self.request.query_params
        asset_type = params.get('type')
        if asset_type:
            queryset = queryset.filter(type=asset_type)
        site = params.get('site') or params.get('site_id')
        if site:
            queryset = queryset.filter(site_id=site)
        folder = params.get('folder')
        if folder:
            queryset = queryset.filter(folder=folder)
        search = params.get('search')
        if search:
            queryset = queryset.filter(Q(original_name__icontains=search) | Q(alt__icontains=search))
        return queryset

    def update(self, request, *args, **kwargs):
        asset = self.get_object()
        serializer = AssetUpdateSerializer(asset, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(AssetSerializer(asset).data)

    def destroy(self, request, *args, **kwargs):
        asset = self.get_object()
        AssetService(request.user).delete(asset)
        return Response({'success': True, 'message': 'Asset deleted successfully'})

    @action(detail=False, methods=['post'])
    def upload(self, request):
        """Upload one file (multipart field `file`)"""
        serializer = AssetUploadSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        file = data.get('file')
        if not file:
            raise ApiError('No file uploaded', status.HTTP_400_BAD_REQUEST)

        try:
            asset = AssetService(request.user).upload(
                file,
                alt=data.get('alt', ''),
                tags=data.get('tags'),
                folder=data.get('folder'),
                site=data.get('site'),
                is_public=data.get('is_public') is not False,
            )
        except ValueError as e:
            raise ApiError(str(e), status.HTTP_400_BAD_REQUEST)

        return Response(AssetSerializer(asset).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_path='storage/info')
    def storage_info(self, request):
        return Response(AssetService(request.user).storage_info())

    @action(detail=False, methods=['delete'], url_path='bulk-delete')
    def bulk_delete(self, request):
        asset_ids = request.data.get('asset_ids', request.data.get('assetIds'))
        if not isinstance(asset_ids, list) or not asset_ids:
            raise ApiError('Please provide an array of asset IDs', status.HTTP_400_BAD_REQUEST)

        try:
            deleted_count = AssetService(request.user).bulk_delete(asset_ids)
        except ValueError as e:
            raise ApiError(str(e), status.HTTP_400_BAD_REQUEST)

        return Response({
            'success': True,
            'message': f'{deleted_count} assets deleted successfully',
            'deleted_count': deleted_count,
        })
