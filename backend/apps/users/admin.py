from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User


@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ['email', 'username', 'role', 'oauth_provider', 'storage_used', 'is_active', 'created_at']
    list_filter = ['role', 'subscription_plan', 'is_staff', 'is_active', 'created_at']
    search_fields = ['email', 'username', 'first_name', 'last_name', 'oauth_uid']
    ordering = ['-created_at']
    fieldsets = UserAdmin.fieldsets + (
        ('Builder', {'fields': ('bio', 'avatar', 'role', 'subscription_plan', 'max_sites')}),
        ('Storage', {'fields': ('storage_used', 'storage_limit')}),
        ('OAuth', {'fields': ('oauth_provider', 'oauth_uid')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Builder', {'fields': ('email', 'role')}),
    )
