"""
Operations — Serializers

Read and write serializers for receipts, deliveries and their lines.
Explicit field lists; no __all__.

@file operations/serializers.py
"""

from rest_framework import serializers

from core.constants import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS

from .models import Delivery, DocumentStatus, Receipt

WRITABLE_STATUSES = [
    DocumentStatus.DRAFT,
    DocumentStatus.WAITING,
    DocumentStatus.READY,
    DocumentStatus.CANCELED,
]


class DocumentLineReadSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_sku = serializers.CharField(source='product.sku', read_only=True)
    uom = serializers.CharField(source='product.uom', read_only=True)
    quantity = serializers.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES, read_only=True,
    )


class StockDocumentReadSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    items = DocumentLineReadSerializer(source='lines', many=True, read_only=True)
    total_items = serializers.DecimalField(
        max_digits=QUANTITY_MAX_DIGITS + 2, decimal_places=QUANTITY_DECIMAL_PLACES, read_only=True,
    )

    class Meta:
        fields = [
            'id', 'code', 'party', 'date', 'status', 'status_display',
            'items', 'total_items', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class ReceiptReadSerializer(StockDocumentReadSerializer):
    supplier = serializers.CharField(source='party', read_only=True)

    class Meta(StockDocumentReadSerializer.Meta):
        model = Receipt
        fields = StockDocumentReadSerializer.Meta.fields + ['supplier']
        read_only_fields = fields


class DeliveryReadSerializer(StockDocumentReadSerializer):
    customer = serializers.CharField(source='party', read_only=True)

    class Meta(StockDocumentReadSerializer.Meta):
        model = Delivery
        fields = StockDocumentReadSerializer.Meta.fields + ['customer']
        read_only_fields = fields


class DocumentLineWriteSerializer(serializers.Serializer):
    """
    Raw line entry. Product lookup and quantity parsing are left to the
    line set so the API reports RESOURCE_NOT_FOUND and INVALID_INPUT.
    """

    product_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    quantity = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class StockDocumentWriteSerializer(serializers.Serializer):
    """Header + lines. DONE is never writable; it is set by validation."""

    party = serializers.CharField(max_length=255)
    date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=WRITABLE_STATUSES, required=False)
    items = DocumentLineWriteSerializer(many=True, required=False)
