from rest_framework import serializers

from apps.sites.models import Site
from .models import Asset
from .services import parse_tags, sanitize_text


class TagsField(serializers.Field):
    """Accepts a list or a comma separated string (multipart forms)."""

    def to_internal_value(self, data):
        if data is None:
            return []
        if not isinstance(data, (str, list)):
            raise serializers.ValidationError('Tags must be a list or a comma separated string')
        return parse_tags(data)

    def to_representation(self, value):
        return value


class AssetSerializer(serializers.ModelSerializer):
    size_formatted = serializers.CharField(read_only=True)

    class Meta:
        model = Asset
        fields = [
            'id', 'user', 'site', 'filename', 'original_name', 'url', 'public_id',
            'type', 'mime_type', 'size', 'size_formatted', 'width', 'height',
            'alt', 'tags', 'folder', 'is_public', 'usage_count',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class AssetUpdateSerializer(serializers.ModelSerializer):
    """Only descriptive fields can change after upload"""
    tags = TagsField(required=False)

    class Meta:
        model = Asset
        fields = ['alt', 'tags', 'is_public']

    def validate_alt(self, value):
        return sanitize_text(value)


class AssetUploadSerializer(serializers.Serializer):
    file = serializers.FileField(required=False)
    alt = serializers.CharField(required=False, allow_blank=True, max_length=500)
    tags = TagsField(required=False)
    folder = serializers.CharField(required=False, allow_blank=True, max_length=100)
    site = serializers.PrimaryKeyRelatedField(queryset=Site.objects.all(), required=False, allow_null=True)
    # Null when the form leaves it out
    is_public = serializers.BooleanField(required=False, allow_null=True, default=None)

    def validate_site(self, value):
        request = self.context.get('request')
        if value is not None and value.user_id != request.user.id:
            raise serializers.ValidationError('Site not found')
        return value
