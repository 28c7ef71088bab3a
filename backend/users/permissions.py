from rest_framework import permissions

from .roles import Role, MANAGER_ROLES


class IsCompanyMember(permissions.BasePermission):
    """Authenticated users that belong to a company."""
    message = "Company context not found."

    def has_permission(self, request, view):
        user = request.user
        if user and user.is_authenticated and user.is_superuser:
            return True
        return bool(user and user.is_authenticated and getattr(user, "company_id", None))


class IsCompanyOwner(permissions.BasePermission):
    """Allow access only to the company owner."""
    def has_permission(self, request, view):
        user = request.user
        if user and user.is_authenticated and user.is_superuser:
            return True
        return bool(user and user.is_authenticated and getattr(user, "role", None) == Role.OWNER)


class IsOwnerOrAdmin(permissions.BasePermission):
    """Allow access to owners and admins."""
    def has_permission(self, request, view):
        user = request.user
        if user and user.is_authenticated and user.is_superuser:
            return True
        return bool(user and user.is_authenticated and getattr(user, "role", None) in MANAGER_ROLES)
