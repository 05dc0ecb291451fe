"""
Inventory — Permissions

Catalogue reads are open to authenticated users; writes require staff.

@file inventory/permissions.py
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission


class CanModifyProduct(BasePermission):
    """Read is open to authenticated users; write requires staff."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return user.is_staff or user.is_superuser
