"""
Custom permission classes for access-level based control.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from .access import DOCTOR, STAFF, OWNER, SUPER_USER, security_level


class _MinLevel(BasePermission):
    min_level = DOCTOR

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and security_level(user) >= self.min_level)


class IsStaffLevel(_MinLevel):
    """Cashier/staff (Admin) or higher."""
    min_level = STAFF


class IsOwnerLevel(_MinLevel):
    """Co-owner or higher."""
    min_level = OWNER


class IsSuperUserLevel(_MinLevel):
    """Owner accounts and Django superusers."""
    min_level = SUPER_USER


class ReadOnly(BasePermission):
    """Allow read‑only access (GET, HEAD, OPTIONS)."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return request.method in SAFE_METHODS


class StaffWriteOrReadOnly(BasePermission):
    """Any authenticated user may read; writes need staff level."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        return request.method in SAFE_METHODS or security_level(user) >= STAFF


class OwnerWriteOrReadOnly(BasePermission):
    """Any authenticated user may read; writes need owner level."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        return request.method in SAFE_METHODS or security_level(user) >= OWNER
