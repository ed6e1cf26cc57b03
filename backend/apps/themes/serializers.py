import re

from rest_framework import serializers

from .models import (
    Theme, default_colors, default_fonts, default_spacing,
    default_border_radius, default_shadows, default_effects
)

HEX_COLOR_RE = re.compile(r'^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$')


class ThemeSerializer(serializers.ModelSerializer):
    created_by = serializers.StringRelatedField(read_only=True)

    class Meta:
        model = Theme
        fields = [
            'id', 'name', 'description', 'thumbnail', 'category',
            'colors', 'fonts', 'spacing', 'border_radius', 'shadows', 'effects',
            'custom_css', 'is_public', 'is_premium', 'usage_count',
            'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'usage_count', 'created_by', 'created_at', 'updated_at']

    def _merge(self, field, value, defaults):
        """Merge a partial JSON bag over the stored value (or the defaults)."""
        if not isinstance(value, dict):
            raise serializers.ValidationError(f'{field} must be an object')
        current = getattr(self.instance, field, None) or defaults()
        return {**defaults(), **current, **value}

    def validate_name(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError('Theme name must be at least 2 characters')
        return value

    def validate_colors(self, value):
        colors = self._merge('colors', value, default_colors)
        for key, color in colors.items():
            if not isinstance(color, str) or not HEX_COLOR_RE.match(color):
                raise serializers.ValidationError(f'{key} must be a valid hex color')
        return colors

    def validate_fonts(self, value):
        fonts = self._merge('fonts', value, default_fonts)
        for key, font in fonts.items():
            if not isinstance(font, str) or not font.strip():
                raise serializers.ValidationError(f'{key} font is required')
        return fonts

    def validate_spacing(self, value):
        return self._merge('spacing', value, default_spacing)

    def validate_border_radius(self, value):
        return self._merge('border_radius', value, default_border_radius)

    def validate_shadows(self, value):
        return self._merge('shadows', value, default_shadows)

    def validate_effects(self, value):
        return self._merge('effects', value, default_effects)


class ThemeListSerializer(serializers.ModelSerializer):
    """Lighter serializer for list views (no custom CSS)"""
    class Meta:
        model = Theme
        fields = [
            'id', 'name', 'description', 'thumbnail', 'category',
            'colors', 'fonts', 'is_public', 'is_premium', 'usage_count', 'created_at'
        ]
