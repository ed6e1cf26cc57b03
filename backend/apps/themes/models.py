from django.conf import settings
from django.db import models


def default_colors():
    return {
        'primary': '#3b82f6',
        'secondary': '#8b5cf6',
        'background': '#ffffff',
        'surface': '#f9fafb',
        'text': '#111827',
        'textSecondary': '#6b7280',
        'border': '#e5e7eb',
        'success': '#10b981',
        'warning': '#f59e0b',
        'error': '#ef4444',
    }


def default_fonts():
    return {'heading': 'Inter', 'body': 'Inter', 'mono': 'Fira Code'}


def default_spacing():
    return {'xs': '0.25rem', 'sm': '0.5rem', 'md': '1rem', 'lg': '1.5rem', 'xl': '2rem', '2xl': '3rem'}


def default_border_radius():
    return {'none': '0', 'sm': '0.125rem', 'md': '0.375rem', 'lg': '0.5rem', 'xl': '0.75rem', 'full': '9999px'}


def default_shadows():
    return {
        'sm': '0 1px 2px 0 rgba(0, 0, 0, 0.05)',
        'md': '0 4px 6px -1px rgba(0, 0, 0, 0.1)',
        'lg': '0 10px 15px -3px rgba(0, 0, 0, 0.1)',
        'xl': '0 20px 25px -5px rgba(0, 0, 0, 0.1)',
    }


def default_effects():
    return {
        'enableHoverEffects': True,
        'hoverScale': 1.05,
        'hoverShadow': '0 20px 25px -5px rgb(0 0 0 / 0.1)',
        'transitionDuration': '300ms',
        'enableGradients': False,
        'enableAlternatingSections': False,
        'buttonHoverBrightness': 1.1,
    }


class Theme(models.Model):
    """Named bundle of colors, fonts and effects applied to a site"""
    CATEGORY_CHOICES = [
        ('modern', 'Modern'),
        ('classic', 'Classic'),
        ('minimal', 'Minimal'),
        ('bold', 'Bold'),
        ('elegant', 'Elegant'),
        ('dark', 'Dark'),
        ('light', 'Light'),
        ('custom', 'Custom'),
    ]

    name = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True)
    thumbnail = models.CharField(max_length=500, blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='custom')

    colors = models.JSONField(default=default_colors)
    fonts = models.JSONField(default=default_fonts)
    spacing = models.JSONField(default=default_spacing)
    border_radius = models.JSONField(default=default_border_radius)
    shadows = models.JSONField(default=default_shadows)
    effects = models.JSONField(default=default_effects)
    custom_css = models.TextField(blank=True, max_length=10000)

    is_public = models.BooleanField(default=True)
    is_premium = models.BooleanField(default=False)
    usage_count = models.IntegerField(default=0)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='themes'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-usage_count', '-created_at']
        indexes = [
            models.Index(fields=['category', 'is_public'], name='theme_category_public_idx'),
        ]

    def __str__(self):
        return self.name
