from rest_framework.permissions import BasePermission


class IsAdminUser(BasePermission):
    """Staff members and superusers may use the admin endpoints."""
    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and (user.is_staff or user.is_superuser))
