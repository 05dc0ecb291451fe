"""
Inventory — Django Admin Configuration

Product catalogue with stock status color coding.

@file inventory/admin.py
"""

from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        'sku', 'name', 'category', 'uom', 'stock', 'reorder_level',
        'status_badge', 'updated_at',
    )
    list_filter = ('category', 'uom')
    search_fields = ('name', 'sku')
    readonly_fields = ('id', 'created_at', 'updated_at')
    list_per_page = 50
    ordering = ('name',)

    fieldsets = (
        (_('Identification'), {
            'fields': ('id', 'sku', 'name', 'category', 'uom'),
        }),
        (_('Stock'), {
            'fields': ('stock', 'reorder_level'),
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    @admin.display(description=_('Status'))
    def status_badge(self, obj):
        colors = {Product.StatusChoices.OK: '#22c55e', Product.StatusChoices.LOW: '#f97316'}
        color = colors.get(obj.status, '#6b7280')
        return format_html(
            '<span style="background:{};color:#fff;padding:2px 8px;'
            'border-radius:4px;font-size:11px;font-weight:600;">{}</span>',
            color, obj.status.label,
        )
