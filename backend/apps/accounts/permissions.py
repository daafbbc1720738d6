"""
Custom permissions for the admin dashboard.
"""
from django.conf import settings
from rest_framework import permissions


def is_allowed_admin(user) -> bool:
    """
    True when the user may use the admin dashboard.

    With ADMIN_EMAIL unset any authenticated user is accepted; otherwise the
    user's email must match it (case-insensitive).
    """
    if not user or not user.is_authenticated:
        return False
    allowed = (getattr(settings, 'ADMIN_EMAIL', '') or '').strip()
    if not allowed:
        return True
    return (user.email or '').lower() == allowed.lower()


class IsRestaurantAdmin(permissions.BasePermission):
    """
    Restrict a view to the restaurant's admin account.
    """
    message = 'Unauthorized'

    def has_permission(self, request, view):
        return is_allowed_admin(request.user)
