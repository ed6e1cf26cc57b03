from django.contrib import admin
from .models import Theme


@admin.register(Theme)
class ThemeAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'is_public', 'is_premium', 'usage_count', 'created_by', 'created_at']
    list_filter = ['category', 'is_public', 'is_premium', 'created_at']
    search_fields = ['name', 'description']
    readonly_fields = ['usage_count', 'created_at', 'updated_at']
