"""
Operations — Stock Availability Checker

Answers "can this product supply this quantity right now". Reads live
stock on every call and never mutates anything. At composition time the
answer is advisory; the validation engine repeats the same comparison
under row locks, where it is authoritative.

@file operations/availability.py
"""

from collections import defaultdict
from decimal import Decimal

from core.constants import ZERO_QUANTITY
from core.exceptions import InsufficientStockError, ResourceNotFoundError
from inventory.models import Product


class StockAvailabilityChecker:
    """Read-only stock sufficiency checks for outbound lines."""

    @staticmethod
    def available_for(product_id, already_reserved: Decimal = ZERO_QUANTITY) -> Decimal:
        """Live stock minus what the document being composed already reserves."""
        stock = Product.objects.filter(pk=product_id).values_list('stock', flat=True).first()
        if stock is None:
            raise ResourceNotFoundError(detail=f'Product {product_id} not found.')
        return stock - already_reserved

    @classmethod
    def ensure_available(
        cls,
        product_id,
        quantity: Decimal,
        already_reserved: Decimal = ZERO_QUANTITY,
    ) -> Decimal:
        available = cls.available_for(product_id, already_reserved)
        if quantity > available:
            raise InsufficientStockError(
                product_id=product_id,
                available=max(available, ZERO_QUANTITY),
                requested=quantity,
            )
        return available

    @staticmethod
    def check_lines(lines, stock_by_product: dict) -> None:
        """
        Check a whole line set against a stock snapshot, reserving as it
        goes so repeated lines for one product accumulate. Raises at the
        first line that cannot be satisfied.
        """
        reserved = defaultdict(Decimal)
        for line in lines:
            stock = stock_by_product.get(line.product_id)
            if stock is None:
                raise ResourceNotFoundError(detail=f'Product {line.product_id} not found.')
            available = stock - reserved[line.product_id]
            if line.quantity > available:
                raise InsufficientStockError(
                    product_id=line.product_id,
                    available=max(available, ZERO_QUANTITY),
                    requested=line.quantity,
                )
            reserved[line.product_id] += line.quantity
