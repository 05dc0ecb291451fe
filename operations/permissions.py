"""
Operations — Permissions

Documents: list/create/edit for authenticated users. Validation moves
stock, so it needs the validate_<model> permission (or superuser).

@file operations/permissions.py
"""

from rest_framework.permissions import BasePermission


class CanManageStockDocument(BasePermission):
    """List/retrieve/create/update/delete: authenticated."""

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return True


class CanValidateStockDocument(BasePermission):
    """Validate: superuser or operations.validate_receipt / validate_delivery."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_superuser:
            return True
        opts = view.service_class.model._meta
        return user.has_perm(f'{opts.app_label}.validate_{opts.model_name}')
