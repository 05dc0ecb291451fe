"""
Inventory — Models

Product catalogue and the current stock quantity per product. Stock is a
stored balance guarded by a non-negative check constraint; it changes only
through ProductService.adjust_stock (document validation) or a direct edit.

@file inventory/models.py
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.constants import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS
from core.models import BaseModel


class Product(BaseModel):
    """
    A stocked product.

    status is derived: LOW once stock falls to or below reorder_level.
    """

    class StatusChoices(models.TextChoices):
        OK = 'ok', _('OK')
        LOW = 'low', _('Low stock')

    name = models.CharField(_('name'), max_length=255)
    sku = models.CharField(_('SKU'), max_length=64, unique=True)
    category = models.CharField(_('category'), max_length=100, blank=True, db_index=True)
    uom = models.CharField(
        _('unit of measure'), max_length=20, default='pcs',
        help_text=_('e.g. pcs, kg, l, box'),
    )
    stock = models.DecimalField(
        _('stock'), max_digits=QUANTITY_MAX_DIGITS,
        decimal_places=QUANTITY_DECIMAL_PLACES, default=0,
    )
    reorder_level = models.DecimalField(
        _('reorder level'), max_digits=QUANTITY_MAX_DIGITS,
        decimal_places=QUANTITY_DECIMAL_PLACES, default=0,
    )

    class Meta:
        verbose_name = _('product')
        verbose_name_plural = _('products')
        ordering = ['name']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name='product_stock_non_negative',
            ),
            models.CheckConstraint(
                condition=models.Q(reorder_level__gte=0),
                name='product_reorder_level_non_negative',
            ),
        ]

    def __str__(self):
        return f'{self.sku} — {self.name}'

    @property
    def status(self):
        if self.stock <= self.reorder_level:
            return self.StatusChoices.LOW
        return self.StatusChoices.OK
