"""
Inventory — Serializers

Read and write serializers for Product. Explicit field lists; no __all__.

@file inventory/serializers.py
"""

from decimal import Decimal

from rest_framework import serializers

from core.constants import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS

from .models import Product


class ProductReadSerializer(serializers.ModelSerializer):
    status = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'sku', 'category', 'uom',
            'stock', 'reorder_level', 'status',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class ProductWriteSerializer(serializers.ModelSerializer):
    """Create accepts initial_stock; update may set stock directly."""

    initial_stock = serializers.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES,
        min_value=Decimal('0'), required=False, write_only=True,
    )
    stock = serializers.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES,
        min_value=Decimal('0'), required=False,
    )
    reorder_level = serializers.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES,
        min_value=Decimal('0'), required=False,
    )

    class Meta:
        model = Product
        fields = ['name', 'sku', 'category', 'uom', 'stock', 'reorder_level', 'initial_stock']
