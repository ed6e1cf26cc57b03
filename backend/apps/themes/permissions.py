from rest_framework import permissions


class ThemeAccessPermission(permissions.BasePermission):
    """
    Public themes are readable by anyone, private ones by their creator.
    Only the creator may change a theme; presets without a creator need
    an admin role.
    """

    message = 'Not authorized to modify this theme'

    def has_object_permission(self, request, view, obj):
        user = request.user
        is_owner = bool(user and user.is_authenticated and obj.created_by_id == user.id)

        if request.method in permissions.SAFE_METHODS or getattr(view, 'action', None) == 'use':
            if obj.is_public or is_owner:
                return True
            self.message = 'Not authorized to access this theme'
            return False

        if obj.created_by_id is None:
            return bool(user and user.is_authenticated and user.is_admin_role)
        return is_owner
