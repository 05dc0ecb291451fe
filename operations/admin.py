"""
Operations — Django Admin Configuration

Receipts and deliveries with inline lines. Validation from the admin goes
through the service layer like the API; status is never edited to DONE
directly.

@file operations/admin.py
"""

from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django.forms.models import BaseInlineFormSet
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import APIException

from .availability import StockAvailabilityChecker
from .lines import LineSet
from .models import (
    Delivery,
    DeliveryLine,
    DocumentSequence,
    DocumentStatus,
    Receipt,
    ReceiptLine,
)
from .sequences import SequenceService
from .services import DeliveryService, ReceiptService

STATUS_COLORS = {
    DocumentStatus.DRAFT: '#6b7280',
    DocumentStatus.WAITING: '#f59e0b',
    DocumentStatus.READY: '#3b82f6',
    DocumentStatus.DONE: '#22c55e',
    DocumentStatus.CANCELED: '#dc2626',
}


class DocumentLineInline(admin.TabularInline):
    extra = 0
    fields = ('product', 'quantity')
    raw_id_fields = ('product',)

    def _locked(self, obj):
        return obj is not None and obj.status not in (
            DocumentStatus.DRAFT, DocumentStatus.WAITING, DocumentStatus.READY,
        )

    def has_add_permission(self, request, obj=None):
        return not self._locked(obj) and super().has_add_permission(request, obj)

    def has_change_permission(self, request, obj=None):
        return not self._locked(obj) and super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        return not self._locked(obj) and super().has_delete_permission(request, obj)


class ReceiptLineInline(DocumentLineInline):
    model = ReceiptLine


def _error_text(exc):
    detail = exc.detail
    if isinstance(detail, dict):
        detail = detail.get('detail', detail)
    return str(detail)


class DeliveryLineFormSet(BaseInlineFormSet):
    """Composes the submitted lines through the availability checker."""

    def clean(self):
        super().clean()
        if any(self.errors):
            return
        line_set = LineSet(checker=StockAvailabilityChecker)
        for form in self.forms:
            data = getattr(form, 'cleaned_data', None)
            if not data or data.get('DELETE'):
                continue
            product, quantity = data.get('product'), data.get('quantity')
            if product is None or quantity is None:
                continue
            try:
                line_set.add_line(product.pk, quantity)
            except APIException as exc:
                raise ValidationError(_error_text(exc))


class DeliveryLineInline(DocumentLineInline):
    model = DeliveryLine
    formset = DeliveryLineFormSet


class StockDocumentAdmin(admin.ModelAdmin):
    list_display = ('code', 'party', 'date', 'status_badge', 'total_items', 'created_at')
    list_filter = ('status', 'date')
    search_fields = ('code', 'party')
    readonly_fields = ('code', 'status', 'created_at', 'updated_at')
    date_hierarchy = 'date'
    ordering = ('-date', '-created_at')
    list_per_page = 30
    actions = ['validate_selected']

    fieldsets = (
        (_('Document'), {'fields': ('code', 'party', 'date', 'status')}),
        (_('Timestamps'), {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    service_class = None

    def get_queryset(self, request):
        return super().get_queryset(request).prefetch_related('lines')

    def save_model(self, request, obj, form, change):
        if not change:
            obj.code = SequenceService.next_code(type(obj))
        super().save_model(request, obj, form, change)

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_done:
            return False
        return super().has_delete_permission(request, obj)

    @admin.display(description=_('Status'))
    def status_badge(self, obj):
        color = STATUS_COLORS.get(obj.status, '#6b7280')
        return format_html(
            '<span style="background:{};color:#fff;padding:2px 8px;'
            'border-radius:4px;font-size:11px;font-weight:600;">{}</span>',
            color, obj.get_status_display(),
        )

    @admin.action(description=_('Validate selected documents'))
    def validate_selected(self, request, queryset):
        validated, failures = 0, []
        for document in queryset.order_by('pk'):
            try:
                self.service_class.validate_document(document_id=document.pk, actor=request.user)
            except APIException as exc:
                failures.append(f'{document.code}: {_error_text(exc)}')
            else:
                validated += 1
        if validated:
            self.message_user(request, f'{validated} document(s) validated.')
        if failures:
            self.message_user(request, '; '.join(failures), level=messages.WARNING)


@admin.register(Receipt)
class ReceiptAdmin(StockDocumentAdmin):
    inlines = [ReceiptLineInline]
    service_class = ReceiptService


@admin.register(Delivery)
class DeliveryAdmin(StockDocumentAdmin):
    inlines = [DeliveryLineInline]
    service_class = DeliveryService


@admin.register(DocumentSequence)
class DocumentSequenceAdmin(admin.ModelAdmin):
    list_display = ('name', 'current_value')
    readonly_fields = ('name', 'current_value')

    def has_add_permission(self, request):
        return False
