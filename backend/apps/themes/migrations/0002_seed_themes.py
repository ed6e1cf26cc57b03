"""
Seed the preset theme catalogue.
"""
from django.db import migrations

PRESETS = [
    {
        'name': 'Modern Blue',
        'description': 'A clean and modern theme with blue accents',
        'category': 'modern',
        'colors': {
            'primary': '#3b82f6', 'secondary': '#8b5cf6', 'background': '#ffffff',
            'surface': '#f8fafc', 'text': '#1e293b', 'textSecondary': '#64748b',
            'border': '#e2e8f0', 'error': '#ef4444', 'success': '#10b981', 'warning': '#f59e0b',
        },
        'fonts': {'heading': 'Poppins', 'body': 'Inter', 'mono': 'JetBrains Mono'},
        'effects': {
            'enableHoverEffects': True, 'hoverScale': 1.05,
            'hoverShadow': '0 20px 25px -5px rgb(0 0 0 / 0.1)', 'transitionDuration': '300ms',
            'enableGradients': False, 'enableAlternatingSections': True,
            'alternateSectionColor': '#f8fafc', 'buttonHoverBrightness': 1.1,
        },
    },
    {
        'name': 'Dark Elegance',
        'description': 'Sophisticated dark theme perfect for modern brands',
        'category': 'dark',
        'colors': {
            'primary': '#6366f1', 'secondary': '#a855f7', 'background': '#0f172a',
            'surface': '#1e293b', 'text': '#f1f5f9', 'textSecondary': '#94a3b8',
            'border': '#334155', 'error': '#f87171', 'success': '#34d399', 'warning': '#fbbf24',
        },
        'fonts': {'heading': 'Playfair Display', 'body': 'Inter', 'mono': 'Fira Code'},
        'effects': {
            'enableHoverEffects': True, 'hoverScale': 1.03,
            'hoverShadow': '0 25px 50px -12px rgb(139 92 246 / 0.25)', 'transitionDuration': '200ms',
            'enableGradients': True, 'gradientDirection': 'to right',
            'enableAlternatingSections': False, 'buttonHoverBrightness': 1.15,
        },
    },
    {
        'name': 'Minimal White',
        'description': 'Ultra-minimal design with plenty of white space',
        'category': 'minimal',
        'colors': {
            'primary': '#000000', 'secondary': '#404040', 'background': '#ffffff',
            'surface': '#fafafa', 'text': '#000000', 'textSecondary': '#737373',
            'border': '#e5e5e5', 'error': '#dc2626', 'success': '#16a34a', 'warning': '#ea580c',
        },
        'fonts': {'heading': 'Raleway', 'body': 'Work Sans', 'mono': 'Monaco'},
        'effects': {
            'enableHoverEffects': True, 'hoverScale': 1.02,
            'hoverShadow': '0 4px 6px -1px rgb(0 0 0 / 0.1)', 'transitionDuration': '150ms',
            'enableGradients': False, 'enableAlternatingSections': False,
            'buttonHoverBrightness': 0.9,
        },
    },
    {
        'name': 'Vibrant Sunset',
        'description': 'Bold and colorful theme with warm tones',
        'category': 'bold',
        'colors': {
            'primary': '#f97316', 'secondary': '#f59e0b', 'background': '#fffbeb',
            'surface': '#ffffff', 'text': '#292524', 'textSecondary': '#78716c',
            'border': '#fde68a', 'error': '#dc2626', 'success': '#16a34a', 'warning': '#ea580c',
        },
        'fonts': {'heading': 'Montserrat', 'body': 'Open Sans', 'mono': 'Source Code Pro'},
        'effects': {
            'enableHoverEffects': True, 'hoverScale': 1.08,
            'hoverShadow': '0 25px 50px -12px rgb(249 115 22 / 0.25)', 'transitionDuration': '250ms',
            'enableGradients': True, 'gradientDirection': 'to bottom right',
            'enableAlternatingSections': True, 'alternateSectionColor': '#ffffff',
            'buttonHoverBrightness': 1.2,
        },
    },
    {
        'name': 'Ocean Breeze',
        'description': 'Calm and refreshing theme inspired by the ocean',
        'category': 'light',
        'colors': {
            'primary': '#0891b2', 'secondary': '#06b6d4', 'background': '#f0fdfa',
            'surface': '#ffffff', 'text': '#0f172a', 'textSecondary': '#475569',
            'border': '#99f6e4', 'error': '#ef4444', 'success': '#10b981', 'warning': '#f59e0b',
        },
        'fonts': {'heading': 'Nunito', 'body': 'Inter', 'mono': 'Fira Code'},
        'effects': {
            'enableHoverEffects': True, 'hoverScale': 1.04,
            'hoverShadow': '0 20px 25px -5px rgb(8 145 178 / 0.2)', 'transitionDuration': '300ms',
            'enableGradients': True, 'gradientDirection': 'to bottom',
            'enableAlternatingSections': True, 'alternateSectionColor': '#ffffff',
            'buttonHoverBrightness': 1.1,
        },
    },
]


def seed_themes(apps, schema_editor):
    Theme = apps.get_model('themes', 'Theme')

    for preset in PRESETS:
        Theme.objects.get_or_create(
            name=preset['name'],
            defaults={
                'description': preset['description'],
                'category': preset['category'],
                'colors': preset['colors'],
                'fonts': preset['fonts'],
                'effects': preset['effects'],
                'is_public': True,
                'is_premium': False,
            }
        )


def reverse_seed(apps, schema_editor):
    Theme = apps.get_model('themes', 'Theme')
    Theme.objects.filter(name__in=[preset['name'] for preset in PRESETS], created_by=None).delete()


class Migration(migrations.Migration):
    dependencies = [
        ('themes', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_themes, reverse_seed),
    ]
