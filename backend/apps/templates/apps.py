from django.apps import AppConfig


class TemplatesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.templates'
    label = 'site_templates'
    verbose_name = 'Site templates'
