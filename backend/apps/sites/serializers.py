"""
Serializers for sites app
"""
from rest_framework import serializers

from apps.editor.schema import SchemaError, normalize_sections, normalize_content
from apps.themes.serializers import HEX_COLOR_RE, ThemeListSerializer
from .models import (
    Site, Page, SUBDOMAIN_VALIDATORS,
    default_custom_theme, default_page_settings
)


class PageSerializer(serializers.ModelSerializer):
    """Serializer for Page, validates the section document"""
    site = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Page
        fields = [
            'id', 'site', 'page_name', 'slug', 'content', 'sections',
            'is_home', 'order', 'is_visible', 'seo', 'settings',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'site', 'created_at', 'updated_at']
        # Slug uniqueness is checked in validate() with a readable message
        validators = []

    def validate_page_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Page name is required')
        return value

    def validate_slug(self, value):
        value = (value or '').strip().lower()
        return '' if value == '/' else value

    def validate_sections(self, value):
        try:
            return normalize_sections(value)
        except SchemaError as e:
            raise serializers.ValidationError(str(e))

    def validate_content(self, value):
        try:
            return normalize_content(value)
        except SchemaError as e:
            raise serializers.ValidationError(str(e))

    def validate_settings(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError('Settings must be an object')
        current = getattr(self.instance, 'settings', None) or default_page_settings()
        return {**default_page_settings(), **current, **value}

    def validate(self, attrs):
        if self.instance is None or 'slug' not in attrs:
            return attrs

        slug = attrs['slug']
        is_home = attrs.get('is_home', self.instance.is_home)
        if not slug and not is_home:
            raise serializers.ValidationError('Slug is required for pages other than the home page')

        taken = Page.objects.filter(site=self.instance.site, slug=slug).exclude(pk=self.instance.pk)
        if slug and taken.exists():
            raise serializers.ValidationError('Slug already exists for this site')
        return attrs


class PageContentSerializer(PageSerializer):
    """Only the page body"""
    class Meta(PageSerializer.Meta):
        fields = ['id', 'site', 'content', 'sections', 'updated_at']


class SiteSettingsMixin:
    """Validation shared by site serializers"""

    def to_internal_value(self, data):
        if isinstance(data.get('subdomain'), str):
            data = data.copy()
            data['subdomain'] = data['subdomain'].strip().lower()
        return super().to_internal_value(data)

    def validate_site_name(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError('Site name must be at least 2 characters')
        return value

    def validate_custom_domain(self, value):
        if not value:
            return None
        return value.strip().lower() or None

    def validate_custom_theme(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError('Custom theme must be an object')
        current = getattr(self.instance, 'custom_theme', None) or default_custom_theme()
        colors = {**current.get('colors', {}), **(value.get('colors') or {})}
        for key, color in colors.items():
            if not isinstance(color, str) or not HEX_COLOR_RE.match(color):
                raise serializers.ValidationError(f'{key} must be a valid hex color')
        fonts = {**current.get('fonts', {}), **(value.get('fonts') or {})}
        custom_css = value.get('customCSS', current.get('customCSS', ''))
        if len(custom_css or '') > 10000:
            raise serializers.ValidationError('Custom CSS cannot exceed 10000 characters')
        return {**current, **value, 'colors': colors, 'fonts': fonts, 'customCSS': custom_css or ''}

    def validate(self, attrs):
        subdomain = attrs.get('subdomain')
        if subdomain:
            taken = Site.objects.filter(subdomain=subdomain)
            if self.instance is not None:
                taken = taken.exclude(pk=self.instance.pk)
            if taken.exists():
                raise serializers.ValidationError('Subdomain already taken')
        return attrs


SITE_WRITABLE_FIELDS = [
    'site_name', 'subdomain', 'custom_domain', 'description', 'favicon',
    'logo', 'logo_width', 'theme', 'custom_theme', 'seo', 'analytics', 'settings'
]


class SiteSerializer(SiteSettingsMixin, serializers.ModelSerializer):
    """Serializer for Site with its theme and pages"""
    user = serializers.StringRelatedField(read_only=True)
    theme_detail = ThemeListSerializer(source='theme', read_only=True)
    pages = PageSerializer(many=True, read_only=True)

    class Meta:
        model = Site
        fields = ['id', 'user', *SITE_WRITABLE_FIELDS, 'theme_detail', 'pages',
                  'is_published', 'published_at', 'last_edited_at', 'created_at', 'updated_at']
        read_only_fields = ['id', 'user', 'is_published', 'published_at',
                            'last_edited_at', 'created_at', 'updated_at']
        extra_kwargs = {
            'subdomain': {'validators': SUBDOMAIN_VALIDATORS},
        }


class SiteListSerializer(serializers.ModelSerializer):
    """Lighter serializer for list views"""
    page_count = serializers.IntegerField(source='pages.count', read_only=True)

    class Meta:
        model = Site
        fields = [
            'id', 'site_name', 'subdomain', 'custom_domain', 'description', 'logo',
            'theme', 'is_published', 'published_at', 'page_count',
            'last_edited_at', 'created_at', 'updated_at'
        ]


class SiteCreateSerializer(SiteSettingsMixin, serializers.ModelSerializer):
    """Serializer for creating a new site"""
    class Meta:
        model = Site
        fields = ['id', *SITE_WRITABLE_FIELDS, 'created_at']
        read_only_fields = ['id', 'created_at']
        extra_kwargs = {
            'subdomain': {'validators': SUBDOMAIN_VALIDATORS},
        }


class PublicSiteSerializer(serializers.ModelSerializer):
    """What the public renderer needs to know about a published site"""
    theme = ThemeListSerializer(read_only=True)

    class Meta:
        model = Site
        fields = [
            'id', 'site_name', 'subdomain', 'custom_domain', 'description',
            'favicon', 'logo', 'logo_width', 'theme', 'custom_theme', 'seo',
            'analytics', 'settings', 'is_published', 'published_at'
        ]
