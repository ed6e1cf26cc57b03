from rest_framework import permissions


class IsAdminRole(permissions.BasePermission):
    """Only users with the admin or super_admin role."""

    message = 'Admin access required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin_role)
