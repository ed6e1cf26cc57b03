from rest_framework import serializers

from apps.sites.models import SUBDOMAIN_VALIDATORS
from .models import SiteTemplate


class SiteTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = SiteTemplate
        fields = [
            'id', 'name', 'slug', 'description', 'category',
            'thumbnail', 'sections', 'usage_count', 'created_at'
        ]
        read_only_fields = ['id', 'usage_count', 'created_at']


class SiteTemplateListSerializer(serializers.ModelSerializer):
    """Lighter serializer for list view"""
    section_count = serializers.SerializerMethodField()

    class Meta:
        model = SiteTemplate
        fields = [
            'id', 'name', 'slug', 'description', 'category',
            'thumbnail', 'section_count', 'usage_count'
        ]

    def get_section_count(self, obj):
        return len(obj.sections or [])


class UseTemplateSerializer(serializers.Serializer):
    site_name = serializers.CharField(max_length=100, min_length=2)
    subdomain = serializers.CharField(max_length=50, required=False, allow_blank=True)

    def validate_subdomain(self, value):
        value = value.strip().lower()
        if value:
            for validator in SUBDOMAIN_VALIDATORS:
                validator(value)
        return value
