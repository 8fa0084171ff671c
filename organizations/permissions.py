"""
Organizations — Permissions

Read access for any member of the organization named by the request;
writes for OWNER / ADMIN / MECHANIC. VIEWER is read-only.

@file organizations/permissions.py
"""

from rest_framework.permissions import BasePermission

from .services import OrganizationService


class CanManageInventory(BasePermission):
    """Requires a view exposing get_organization() (OrganizationScopedMixin)."""

    message = 'Your role in this organization is read-only.'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        # Resolving raises 404 for non-members before any role check.
        organization = view.get_organization()
        if request.method in ('GET', 'HEAD', 'OPTIONS'):
            return True
        return OrganizationService.can_write(request.user, organization)
