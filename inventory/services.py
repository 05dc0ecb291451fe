"""
Inventory — Service Layer

Product lookup, product CRUD and the atomic stock mutation primitive used
by document validation. adjust_stock is a single conditional UPDATE, so the
sufficiency check and the decrement cannot be separated by another writer.

@file inventory/services.py
"""

import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import F, ProtectedError
from django.utils import timezone

from core.exceptions import (
    BusinessRuleViolation,
    DuplicateResourceError,
    InsufficientStockError,
    ResourceNotFoundError,
)

from .models import Product

logger = logging.getLogger('stockflow')

PRODUCT_FIELDS = ('name', 'sku', 'category', 'uom', 'stock', 'reorder_level')


class ProductService:
    """Product collaborator: lookups, CRUD and stock deltas."""

    @staticmethod
    def get_product(product_id) -> Product:
        try:
            return Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise ResourceNotFoundError(detail=f'Product {product_id} not found.')

    @staticmethod
    def adjust_stock(*, product_id, delta: Decimal) -> Decimal:
        """
        Apply a stock delta (positive for receipts, negative for deliveries).

        Rejects with InsufficientStockError if the result would be negative;
        in that case nothing is written. Returns the new stock.
        """
        delta = Decimal(delta)
        qs = Product.objects.filter(pk=product_id)
        if delta < 0:
            qs = qs.filter(stock__gte=-delta)
        updated = qs.update(stock=F('stock') + delta, updated_at=timezone.now())
        if not updated:
            current = Product.objects.filter(pk=product_id).values_list('stock', flat=True).first()
            if current is None:
                raise ResourceNotFoundError(detail=f'Product {product_id} not found.')
            raise InsufficientStockError(
                product_id=product_id, available=current, requested=-delta,
            )
        stock = Product.objects.values_list('stock', flat=True).get(pk=product_id)
        logger.info('Stock adjusted product=%s delta=%s stock=%s', product_id, delta, stock)
        return stock

    @staticmethod
    @transaction.atomic
    def create_product(*, initial_stock: Decimal = Decimal('0'), **fields) -> Product:
        product = Product(stock=initial_stock, **fields)
        product.full_clean(validate_unique=False)
        try:
            with transaction.atomic():
                product.save()
        except IntegrityError:
            raise DuplicateResourceError(detail=f'SKU {product.sku} already exists.')
        logger.info('Product %s created sku=%s stock=%s', product.pk, product.sku, product.stock)
        return product

    @staticmethod
    @transaction.atomic
    def update_product(*, product_id, **fields) -> Product:
        """
        Update product attributes. Setting `stock` here is the direct-edit
        path: it bypasses documents but is still bounded by stock >= 0.
        """
        try:
            product = Product.objects.select_for_update().get(pk=product_id)
        except Product.DoesNotExist:
            raise ResourceNotFoundError(detail=f'Product {product_id} not found.')

        for field, value in fields.items():
            if field in PRODUCT_FIELDS:
                setattr(product, field, value)

        product.full_clean()
        product.save()
        return product

    @staticmethod
    @transaction.atomic
    def delete_product(*, product_id) -> None:
        product = ProductService.get_product(product_id)
        try:
            product.delete()
        except ProtectedError:
            raise BusinessRuleViolation(
                detail='Product is referenced by receipt or delivery lines and cannot be deleted.',
            )
        logger.info('Product %s deleted.', product_id)
