from django.contrib import admin
from .models import Site, Page


class PageInline(admin.TabularInline):
    model = Page
    fields = ['page_name', 'slug', 'is_home', 'order', 'is_visible']
    extra = 0


@admin.register(Site)
class SiteAdmin(admin.ModelAdmin):
    list_display = ['site_name', 'subdomain', 'user', 'is_published', 'published_at', 'updated_at']
    list_filter = ['is_published', 'created_at']
    search_fields = ['site_name', 'subdomain', 'custom_domain', 'user__email']
    readonly_fields = ['published_at', 'last_edited_at', 'created_at', 'updated_at']
    inlines = [PageInline]


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display = ['page_name', 'site', 'slug', 'is_home', 'order', 'is_visible', 'updated_at']
    list_filter = ['is_home', 'is_visible']
    search_fields = ['page_name', 'slug', 'site__subdomain']
