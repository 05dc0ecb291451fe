"""
Tests — ReceiptService / DeliveryService lifecycle and the validation engine.
Stock never goes negative; validation is all-or-nothing and happens at most
once; editing replaces lines wholesale without touching stock.

@file operations/tests/test_services.py
"""

import datetime
from decimal import Decimal

import pytest
from django.db import DatabaseError

from core.exceptions import (
    AlreadyValidatedError,
    InsufficientStockError,
    InvalidInputError,
    InvalidStateTransition,
    ResourceNotFoundError,
    StorageConflictError,
)
from inventory.models import Product
from inventory.services import ProductService
from operations.models import Delivery, DeliveryLine, DocumentStatus, Receipt, ReceiptLine
from operations.services import DeliveryService, ReceiptService
from tests.factories import (
    DeliveryFactory,
    DeliveryLineFactory,
    ProductFactory,
    ReceiptFactory,
    ReceiptLineFactory,
)


pytestmark = pytest.mark.django_db


def _stock(product):
    return Product.objects.values_list('stock', flat=True).get(pk=product.pk)


class TestCreateDocument:

    def test_receipt_codes_sequential(self):
        codes = [ReceiptService.create_document(party=f'Supplier {i}').code for i in range(3)]
        assert codes == ['RCP-001', 'RCP-002', 'RCP-003']

    def test_create_with_lines_and_total(self):
        a, b = ProductFactory(), ProductFactory()
        receipt = ReceiptService.create_document(
            party='Acme',
            items=[{'product_id': a.pk, 'quantity': 2}, {'product_id': b.pk, 'quantity': 3}],
        )
        assert receipt.status == DocumentStatus.DRAFT
        assert receipt.lines.count() == 2
        assert receipt.total_items == Decimal('5')

    def test_create_does_not_touch_stock(self):
        product = ProductFactory(stock=Decimal('10'))
        ReceiptService.create_document(party='Acme', items=[(product.pk, 5)])
        DeliveryService.create_document(party='Shop', items=[(product.pk, 5)])
        assert _stock(product) == Decimal('10')

    def test_party_required(self):
        with pytest.raises(InvalidInputError):
            ReceiptService.create_document(party='   ')

    def test_cannot_start_done(self):
        with pytest.raises(InvalidInputError):
            ReceiptService.create_document(party='Acme', status=DocumentStatus.DONE)

    def test_delivery_beyond_stock_rejected(self):
        product = ProductFactory(stock=Decimal('3'))
        with pytest.raises(InsufficientStockError):
            DeliveryService.create_document(party='Shop', items=[(product.pk, 2), (product.pk, 2)])
        assert not Delivery.objects.exists()

    def test_failed_create_does_not_consume_code(self):
        with pytest.raises(ResourceNotFoundError):
            ReceiptService.create_document(party='Acme', items=[(999999, 1)])
        assert ReceiptService.create_document(party='Acme').code == 'RCP-001'


class TestUpdateDocument:

    def test_replaces_lines_wholesale(self):
        a, b = ProductFactory(stock=Decimal('1')), ProductFactory()
        receipt = ReceiptService.create_document(party='Acme', items=[(a.pk, 2), (a.pk, 3)])
        ReceiptService.update_document(document_id=receipt.pk, items=[(b.pk, 7)])
        lines = list(ReceiptLine.objects.filter(document=receipt))
        assert [(line.product_id, line.quantity) for line in lines] == [(b.pk, Decimal('7'))]
        assert _stock(a) == Decimal('1')

    def test_delivery_edit_replaces_lines_without_touching_stock(self):
        a = ProductFactory(stock=Decimal('10'))
        b = ProductFactory(stock=Decimal('10'))
        delivery = DeliveryService.create_document(party='Shop', items=[(a.pk, 5), (b.pk, 2)])
        DeliveryService.update_document(document_id=delivery.pk, items=[(a.pk, 3)])
        lines = list(DeliveryLine.objects.filter(document=delivery))
        assert [(line.product_id, line.quantity) for line in lines] == [(a.pk, Decimal('3'))]
        assert _stock(a) == Decimal('10')
        assert _stock(b) == Decimal('10')

    def test_header_only_keeps_lines(self):
        product = ProductFactory()
        receipt = ReceiptService.create_document(party='Acme', items=[(product.pk, 2)])
        updated = ReceiptService.update_document(
            document_id=receipt.pk, party='Globex', status=DocumentStatus.READY,
        )
        assert updated.party == 'Globex'
        assert updated.status == DocumentStatus.READY
        assert updated.lines.count() == 1

    def test_edit_delivery_lines_beyond_stock_allowed(self):
        product = ProductFactory(stock=Decimal('1'))
        delivery = DeliveryService.create_document(party='Shop')
        DeliveryService.update_document(document_id=delivery.pk, items=[(product.pk, 50)])
        assert delivery.lines.count() == 1

    def test_invalid_items_keep_existing_lines(self):
        product = ProductFactory()
        receipt = ReceiptService.create_document(party='Acme', items=[(product.pk, 2)])
        with pytest.raises(InvalidInputError):
            ReceiptService.update_document(document_id=receipt.pk, items=[(product.pk, 0)])
        assert receipt.lines.count() == 1

    def test_done_rejected(self):
        receipt = ReceiptFactory(status=DocumentStatus.DONE)
        with pytest.raises(AlreadyValidatedError):
            ReceiptService.update_document(document_id=receipt.pk, party='x')

    def test_canceled_is_terminal(self):
        receipt = ReceiptFactory(status=DocumentStatus.CANCELED)
        with pytest.raises(InvalidStateTransition):
            ReceiptService.update_document(document_id=receipt.pk, status=DocumentStatus.DRAFT)

    def test_status_cannot_be_set_to_done(self):
        receipt = ReceiptFactory()
        with pytest.raises(InvalidStateTransition):
            ReceiptService.update_document(document_id=receipt.pk, status=DocumentStatus.DONE)

    def test_cancel(self):
        receipt = ReceiptFactory(status=DocumentStatus.WAITING)
        updated = ReceiptService.update_document(
            document_id=receipt.pk, status=DocumentStatus.CANCELED,
        )
        assert updated.status == DocumentStatus.CANCELED

    def test_unknown_document(self):
        with pytest.raises(ResourceNotFoundError):
            ReceiptService.update_document(document_id=999999, party='x')


class TestValidateReceipt:

    def test_adds_stock_and_marks_done(self):
        product = ProductFactory(stock=Decimal('10'))
        receipt = ReceiptService.create_document(party='Acme', items=[(product.pk, 5)])
        validated = ReceiptService.validate_document(document_id=receipt.pk)
        assert validated.status == DocumentStatus.DONE
        assert _stock(product) == Decimal('15')

    def test_repeated_product_applied_per_line(self):
        product = ProductFactory(stock=Decimal('0'))
        receipt = ReceiptService.create_document(
            party='Acme', items=[(product.pk, 2), (product.pk, 3)],
        )
        ReceiptService.validate_document(document_id=receipt.pk)
        assert _stock(product) == Decimal('5')

    def test_second_validation_rejected_without_effect(self):
        product = ProductFactory(stock=Decimal('0'))
        receipt = ReceiptService.create_document(party='Acme', items=[(product.pk, 5)])
        ReceiptService.validate_document(document_id=receipt.pk)
        with pytest.raises(AlreadyValidatedError):
            ReceiptService.validate_document(document_id=receipt.pk)
        assert _stock(product) == Decimal('5')

    def test_empty_document_rejected(self):
        receipt = ReceiptService.create_document(party='Acme')
        with pytest.raises(InvalidInputError):
            ReceiptService.validate_document(document_id=receipt.pk)
        receipt.refresh_from_db()
        assert receipt.status == DocumentStatus.DRAFT

    def test_canceled_cannot_be_validated(self):
        line = ReceiptLineFactory(document=ReceiptFactory(status=DocumentStatus.CANCELED))
        with pytest.raises(InvalidStateTransition):
            ReceiptService.validate_document(document_id=line.document_id)
        assert _stock(line.product) == Decimal('0')

    def test_failure_mid_apply_rolls_back(self, monkeypatch):
        a, b = ProductFactory(stock=Decimal('1')), ProductFactory(stock=Decimal('1'))
        receipt = ReceiptService.create_document(party='Acme', items=[(a.pk, 5), (b.pk, 5)])
        original = ProductService.adjust_stock
        calls = []

        def flaky_adjust(*, product_id, delta):
            calls.append(product_id)
            if len(calls) == 2:
                raise StorageConflictError()
            return original(product_id=product_id, delta=delta)

        monkeypatch.setattr(ProductService, 'adjust_stock', staticmethod(flaky_adjust))
        with pytest.raises(StorageConflictError):
            ReceiptService.validate_document(document_id=receipt.pk)
        assert _stock(a) == Decimal('1')
        assert _stock(b) == Decimal('1')
        receipt.refresh_from_db()
        assert receipt.status == DocumentStatus.DRAFT


class TestValidateDelivery:

    def test_scenario(self):
        product = ProductFactory(stock=Decimal('10'))
        delivery = DeliveryService.create_document(party='Shop', items=[(product.pk, 4)])
        DeliveryService.validate_document(document_id=delivery.pk)
        assert _stock(product) == Decimal('6')

        with pytest.raises(AlreadyValidatedError):
            DeliveryService.validate_document(document_id=delivery.pk)
        assert _stock(product) == Decimal('6')

        with pytest.raises(InsufficientStockError) as excinfo:
            DeliveryService.create_document(party='Shop', items=[(product.pk, 20)])
        assert excinfo.value.product_id == product.pk
        assert excinfo.value.available == Decimal('6')
        assert _stock(product) == Decimal('6')

    def test_stock_dropped_after_composition(self):
        product = ProductFactory(stock=Decimal('10'))
        delivery = DeliveryService.create_document(party='Shop', items=[(product.pk, 8)])
        Product.objects.filter(pk=product.pk).update(stock=Decimal('5'))
        with pytest.raises(InsufficientStockError) as excinfo:
            DeliveryService.validate_document(document_id=delivery.pk)
        assert excinfo.value.available == Decimal('5')
        assert _stock(product) == Decimal('5')
        delivery.refresh_from_db()
        assert delivery.status == DocumentStatus.DRAFT

    def test_later_line_shortfall_leaves_earlier_lines_unapplied(self):
        a = ProductFactory(stock=Decimal('10'))
        b = ProductFactory(stock=Decimal('1'))
        delivery = DeliveryFactory()
        DeliveryLineFactory(document=delivery, product=a, quantity=Decimal('4'))
        DeliveryLineFactory(document=delivery, product=b, quantity=Decimal('2'))
        with pytest.raises(InsufficientStockError) as excinfo:
            DeliveryService.validate_document(document_id=delivery.pk)
        assert excinfo.value.product_id == b.pk
        assert _stock(a) == Decimal('10')
        assert _stock(b) == Decimal('1')

    def test_repeated_product_checked_cumulatively(self):
        product = ProductFactory(stock=Decimal('10'))
        delivery = DeliveryFactory()
        DeliveryLineFactory(document=delivery, product=product, quantity=Decimal('6'))
        DeliveryLineFactory(document=delivery, product=product, quantity=Decimal('6'))
        with pytest.raises(InsufficientStockError):
            DeliveryService.validate_document(document_id=delivery.pk)
        assert _stock(product) == Decimal('10')

    def test_exact_stock_reaches_zero(self):
        product = ProductFactory(stock=Decimal('2.5'))
        delivery = DeliveryService.create_document(party='Shop', items=[(product.pk, '2.5')])
        DeliveryService.validate_document(document_id=delivery.pk)
        assert _stock(product) == Decimal('0')

    def test_second_delivery_sees_first(self):
        product = ProductFactory(stock=Decimal('10'))
        first = DeliveryService.create_document(party='A', items=[(product.pk, 7)])
        second = DeliveryService.create_document(party='B', items=[(product.pk, 7)])
        DeliveryService.validate_document(document_id=first.pk)
        with pytest.raises(InsufficientStockError):
            DeliveryService.validate_document(document_id=second.pk)
        assert _stock(product) == Decimal('3')

    def test_lost_conditional_update_surfaces_as_conflict(self, monkeypatch):
        product = ProductFactory(stock=Decimal('10'))
        delivery = DeliveryService.create_document(party='Shop', items=[(product.pk, 4)])

        def racing_adjust(*, product_id, delta):
            raise InsufficientStockError(
                product_id=product_id, available=Decimal('0'), requested=-delta,
            )

        monkeypatch.setattr(ProductService, 'adjust_stock', staticmethod(racing_adjust))
        with pytest.raises(StorageConflictError):
            DeliveryService.validate_document(document_id=delivery.pk)
        delivery.refresh_from_db()
        assert delivery.status == DocumentStatus.DRAFT


class TestDeleteDocument:

    def test_delete_removes_lines(self):
        product = ProductFactory()
        receipt = ReceiptService.create_document(party='Acme', items=[(product.pk, 1)])
        ReceiptService.delete_document(document_id=receipt.pk)
        assert not Receipt.objects.filter(pk=receipt.pk).exists()
        assert not ReceiptLine.objects.filter(document_id=receipt.pk).exists()

    def test_storage_error_surfaces_as_conflict(self, monkeypatch):
        receipt = ReceiptService.create_document(party='Acme')

        def failing_delete(self, *args, **kwargs):
            raise DatabaseError('cascade failed')

        monkeypatch.setattr(Receipt, 'delete', failing_delete)
        with pytest.raises(StorageConflictError):
            ReceiptService.delete_document(document_id=receipt.pk)
        assert Receipt.objects.filter(pk=receipt.pk).exists()

    def test_done_cannot_be_deleted(self):
        line = DeliveryLineFactory(document=DeliveryFactory(status=DocumentStatus.DONE))
        with pytest.raises(AlreadyValidatedError):
            DeliveryService.delete_document(document_id=line.document_id)
        assert DeliveryLine.objects.filter(pk=line.pk).exists()

    def test_codes_not_reused_after_delete(self):
        first = ReceiptService.create_document(party='Acme')
        ReceiptService.delete_document(document_id=first.pk)
        assert ReceiptService.create_document(party='Acme').code == 'RCP-002'

    def test_unknown_document(self):
        with pytest.raises(ResourceNotFoundError):
            DeliveryService.delete_document(document_id=999999)


class TestListDocuments:

    def test_newest_date_first(self):
        old = ReceiptFactory(date=datetime.date(2024, 1, 1))
        new = ReceiptFactory(date=datetime.date(2025, 1, 1))
        assert list(ReceiptService.list_documents()) == [new, old]
