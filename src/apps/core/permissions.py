# apps/core/permissions.py
"""
DRF Permission Classes

Role checks go through Role.is_admin, never a string comparison.
"""

from rest_framework import permissions

from apps.core.models import Role


def is_admin(user) -> bool:
    """True for an authenticated admin account."""
    if not user or not getattr(user, 'is_authenticated', False):
        return False
    return Role.is_admin(user.role)


class IsAdminRole(permissions.BasePermission):
    """
    Permission class that requires the admin role.
    """

    message = 'Admin access required'

    def has_permission(self, request, view) -> bool:
        return is_admin(request.user)

