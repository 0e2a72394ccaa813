"""
Permission classes for the management API.
"""
from django.conf import settings
from rest_framework.permissions import BasePermission, SAFE_METHODS

MANAGER_ROLES = {"manager", "admin"}


class IsManagerRole(BasePermission):
    """Allow access only to users with a manager or admin role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) in MANAGER_ROLES)


class IsManagerOrReadOnly(IsManagerRole):
    """Reads are open to the dashboard; writes follow ``API_WRITE_REQUIRES_AUTH``.

    With the flag off (kiosk/dev deployments) anyone may write, matching
    the unauthenticated management screens.  With it on, only managers
    and admins may create, update or delete.
    """
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        if request.method in SAFE_METHODS:
            return True
        if not getattr(settings, "API_WRITE_REQUIRES_AUTH", False):
            return True
        return super().has_permission(request, view)
