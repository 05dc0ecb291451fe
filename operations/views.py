"""
Operations — Views

DRF ViewSets for receipts and deliveries: CRUD through the service layer
and the validate action that applies a document to stock.

@file operations/views.py
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import DocumentStatus
from .permissions import CanManageStockDocument, CanValidateStockDocument
from .serializers import (
    DeliveryReadSerializer,
    ReceiptReadSerializer,
    StockDocumentWriteSerializer,
)
from .services import DeliveryService, ReceiptService


class StockDocumentViewSet(viewsets.ModelViewSet):
    """
    Documents: list, create, retrieve, update (lines replaced wholesale),
    destroy (not once validated). Workflow: validate.
    """

    permission_classes = [IsAuthenticated, CanManageStockDocument]
    filterset_fields = ['status', 'date']
    search_fields = ['code', 'party']
    ordering_fields = ['date', 'created_at', 'code', 'status']
    ordering = ['-date', '-created_at']

    service_class = None
    read_serializer_class = None

    def get_queryset(self):
        return self.service_class.list_documents()

    def get_serializer_class(self):
        if self.action in ('list', 'retrieve'):
            return self.read_serializer_class
        return StockDocumentWriteSerializer

    def _represent(self, document):
        document = self.service_class.get_document(document.pk)
        return self.read_serializer_class(document, context=self.get_serializer_context()).data

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        document = self.service_class.create_document(
            party=data['party'],
            date=data.get('date'),
            status=data.get('status', DocumentStatus.DRAFT),
            items=data.get('items', []),
            actor=request.user,
        )
        return Response(self._represent(document), status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.get('partial', False)
        document = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        updated = self.service_class.update_document(
            document_id=document.pk,
            party=data.get('party'),
            date=data.get('date'),
            status=data.get('status'),
            # PUT replaces the whole document; omitted items mean no lines.
            items=data.get('items', None if partial else []),
            actor=request.user,
        )
        return Response(self._represent(updated))

    def perform_destroy(self, instance):
        self.service_class.delete_document(document_id=instance.pk, actor=self.request.user)

    @action(
        detail=True,
        methods=['post'],
        url_path='validate',
        url_name='validate',
        permission_classes=[IsAuthenticated, CanValidateStockDocument],
    )
    def validate_document(self, request, pk=None):
        document = self.service_class.validate_document(document_id=pk, actor=request.user)
        return Response(self._represent(document), status=status.HTTP_200_OK)


class ReceiptViewSet(StockDocumentViewSet):
    service_class = ReceiptService
    read_serializer_class = ReceiptReadSerializer


class DeliveryViewSet(StockDocumentViewSet):
    service_class = DeliveryService
    read_serializer_class = DeliveryReadSerializer
