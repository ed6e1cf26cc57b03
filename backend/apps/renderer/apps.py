from django.apps import AppConfig


class RendererConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.renderer'
    verbose_name = 'Site Renderer'
