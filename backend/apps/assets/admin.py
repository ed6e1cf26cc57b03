from django.contrib import admin
from .models import Asset


@admin.register(Asset)
class AssetAdmin(admin.ModelAdmin):
    list_display = ['original_name', 'user', 'type', 'mime_type', 'size_formatted', 'is_public', 'created_at']
    list_filter = ['type', 'is_public', 'mime_type']
    search_fields = ['original_name', 'alt', 'user__email']
    readonly_fields = ['filename', 'public_id', 'url', 'size', 'width', 'height']
