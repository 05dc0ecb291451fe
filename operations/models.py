"""
Operations — Models

Stock documents: receipts (supplier intake, stock +) and deliveries
(customer dispatch, stock -). Each document is a header plus lines of
(product, quantity). Lines are owned by their document and replaced
wholesale on edit. DocumentSequence holds the per-type code counter.

@file operations/models.py
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.constants import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS
from core.models import BaseModel

from .lines import LineSet


class DocumentStatus(models.TextChoices):
    DRAFT = 'draft', _('Draft')
    WAITING = 'waiting', _('Waiting')
    READY = 'ready', _('Ready')
    DONE = 'done', _('Done')
    CANCELED = 'canceled', _('Canceled')


# Statuses in which a document may still be edited and validated.
MUTABLE_STATUSES = {DocumentStatus.DRAFT, DocumentStatus.WAITING, DocumentStatus.READY}


class StockDocument(BaseModel):
    """
    Abstract receipt/delivery header.

    code is assigned once at creation from DocumentSequence. status moves
    to DONE only through validation, which applies the lines to stock.
    """

    CODE_PREFIX = ''
    SEQUENCE_NAME = ''
    # +1 adds line quantities to stock on validation, -1 subtracts them.
    STOCK_DIRECTION = 0

    code = models.CharField(_('code'), max_length=20, unique=True, editable=False)
    party = models.CharField(_('party'), max_length=255)
    date = models.DateField(_('date'), default=timezone.localdate, db_index=True)
    status = models.CharField(
        _('status'), max_length=10,
        choices=DocumentStatus.choices,
        default=DocumentStatus.DRAFT,
        db_index=True,
    )

    class Meta:
        abstract = True
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f'{self.code} {self.party} ({self.status})'

    @property
    def is_done(self):
        return self.status == DocumentStatus.DONE

    @property
    def total_items(self):
        """Sum of line quantities (not the number of lines)."""
        return LineSet.from_document(self).total_quantity()


class DocumentLine(models.Model):
    """Abstract (product, quantity) line. No identity outside its document."""

    product = models.ForeignKey(
        'inventory.Product',
        on_delete=models.PROTECT,
        related_name='%(class)ss',
        verbose_name=_('product'),
    )
    quantity = models.DecimalField(
        _('quantity'), max_digits=QUANTITY_MAX_DIGITS,
        decimal_places=QUANTITY_DECIMAL_PLACES,
    )

    class Meta:
        abstract = True
        ordering = ['id']

    def __str__(self):
        return f'{self.document_id} — {self.product_id} × {self.quantity}'


class Receipt(StockDocument):
    """Inbound stock from a supplier (party)."""

    CODE_PREFIX = 'RCP-'
    SEQUENCE_NAME = 'receipt'
    STOCK_DIRECTION = 1

    class Meta(StockDocument.Meta):
        verbose_name = _('receipt')
        verbose_name_plural = _('receipts')
        indexes = [
            models.Index(fields=['status', 'date']),
        ]
        permissions = [
            ('validate_receipt', _('Can validate receipt')),
        ]


class ReceiptLine(DocumentLine):
    document = models.ForeignKey(
        Receipt,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('receipt'),
    )

    class Meta(DocumentLine.Meta):
        verbose_name = _('receipt line')
        verbose_name_plural = _('receipt lines')
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name='receipt_line_quantity_positive',
            ),
        ]


class Delivery(StockDocument):
    """Outbound stock to a customer (party)."""

    CODE_PREFIX = 'DEL-'
    SEQUENCE_NAME = 'delivery'
    STOCK_DIRECTION = -1

    class Meta(StockDocument.Meta):
        verbose_name = _('delivery')
        verbose_name_plural = _('deliveries')
        indexes = [
            models.Index(fields=['status', 'date']),
        ]
        permissions = [
            ('validate_delivery', _('Can validate delivery')),
        ]


class DeliveryLine(DocumentLine):
    document = models.ForeignKey(
        Delivery,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('delivery'),
    )

    class Meta(DocumentLine.Meta):
        verbose_name = _('delivery line')
        verbose_name_plural = _('delivery lines')
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name='delivery_line_quantity_positive',
            ),
        ]


class DocumentSequence(models.Model):
    """
    Monotonic counter per document type. Locked with SELECT ... FOR UPDATE
    while a code is allocated; never decremented, so codes of deleted
    documents are not reused.
    """

    name = models.CharField(_('name'), max_length=32, unique=True)
    current_value = models.PositiveIntegerField(_('current value'), default=0)

    class Meta:
        verbose_name = _('document sequence')
        verbose_name_plural = _('document sequences')

    def __str__(self):
        return f'{self.name}={self.current_value}'
