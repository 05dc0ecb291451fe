"""
Inventory — Views

DRF ViewSet for the product catalogue. Writes go through ProductService.

@file inventory/views.py
"""

from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import Product
from .permissions import CanModifyProduct
from .serializers import ProductReadSerializer, ProductWriteSerializer
from .services import ProductService


class ProductViewSet(viewsets.ModelViewSet):
    """
    Products: list, create, retrieve, update, destroy.

    Destroy is rejected while any document line references the product.
    """

    permission_classes = [IsAuthenticated, CanModifyProduct]
    filterset_fields = ['category', 'uom']
    search_fields = ['name', 'sku']
    ordering_fields = ['name', 'sku', 'stock', 'created_at']
    ordering = ['name']

    def get_queryset(self):
        return Product.objects.all()

    def get_serializer_class(self):
        if self.action in ('list', 'retrieve'):
            return ProductReadSerializer
        return ProductWriteSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop('stock', None)
        product = ProductService.create_product(**data)
        return Response(ProductReadSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        product = self.get_object()
        serializer = self.get_serializer(
            product, data=request.data, partial=kwargs.get('partial', False),
        )
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop('initial_stock', None)
        updated = ProductService.update_product(product_id=product.pk, **data)
        return Response(ProductReadSerializer(updated).data)

    def perform_destroy(self, instance):
        ProductService.delete_product(product_id=instance.pk)
