"""
Operations — Service Layer

Receipt and delivery lifecycle: create, edit (wholesale line replacement),
validate (the only path from document lines to product stock) and delete.
Every operation is one transaction.atomic unit; any failure, including an
insufficient-stock check, rolls the whole unit back.

@file operations/services.py
"""

import functools
import logging

from django.db import DatabaseError, transaction
from django.utils import timezone

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

from .availability import StockAvailabilityChecker
from .lines import LineSet
from .models import (
    MUTABLE_STATUSES,
    Delivery,
    DeliveryLine,
    DocumentStatus,
    Receipt,
    ReceiptLine,
)
from .sequences import SequenceService

logger = logging.getLogger('stockflow')

# Header status changes allowed on edit. DONE is reachable only through validation.
STATUS_TRANSITIONS = {
    DocumentStatus.DRAFT: {DocumentStatus.WAITING, DocumentStatus.READY, DocumentStatus.CANCELED},
    DocumentStatus.WAITING: {DocumentStatus.DRAFT, DocumentStatus.READY, DocumentStatus.CANCELED},
    DocumentStatus.READY: {DocumentStatus.DRAFT, DocumentStatus.WAITING, DocumentStatus.CANCELED},
    DocumentStatus.DONE: set(),
    DocumentStatus.CANCELED: set(),
}


def _assert_transition(document, new_status: str) -> None:
    if new_status == document.status:
        return
    allowed = STATUS_TRANSITIONS.get(document.status, set())
    if new_status not in allowed:
        raise InvalidStateTransition(
            detail=f'Cannot transition {document.code} from {document.status} to {new_status}.',
        )


def _assert_editable(document) -> None:
    if document.status == DocumentStatus.DONE:
        raise AlreadyValidatedError(detail=f'{document.code} has already been validated.')
    if document.status == DocumentStatus.CANCELED:
        raise InvalidStateTransition(detail=f'{document.code} is canceled.')


def _clean_party(party) -> str:
    party = (party or '').strip()
    if not party:
        raise InvalidInputError(detail='Party (supplier or customer) is required.')
    return party


def _clean_status(status) -> str:
    if status not in DocumentStatus.values:
        raise InvalidInputError(detail=f'Unknown status {status!r}.')
    return status


def surface_storage_conflicts(func):
    """
    Turn database errors escaping an atomic unit into StorageConflictError.
    Must wrap the transaction.atomic layer so the rollback has already
    happened when the error is reported.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.exception('%s rolled back on storage error.', func.__name__)
            raise StorageConflictError() from exc
    return wrapper


class DocumentService:
    """Lifecycle shared by receipts and deliveries; subclasses bind the models."""

    model = None
    line_model = None
    # Availability checker applied while composing lines (deliveries only).
    checker = None

    @classmethod
    def _label(cls) -> str:
        return str(cls.model._meta.verbose_name).capitalize()

    @classmethod
    def new_line_set(cls) -> LineSet:
        return LineSet(checker=cls.checker)

    @classmethod
    def list_documents(cls):
        return cls.model.objects.prefetch_related('lines__product')

    @classmethod
    def get_document(cls, document_id):
        try:
            return cls.list_documents().get(pk=document_id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            raise ResourceNotFoundError(detail=f'{cls._label()} {document_id} not found.')

    @classmethod
    def _lock(cls, document_id):
        try:
            return cls.model.objects.select_for_update().get(pk=document_id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            raise ResourceNotFoundError(detail=f'{cls._label()} {document_id} not found.')

    @classmethod
    def _write_lines(cls, document, line_set: LineSet) -> None:
        cls.line_model.objects.bulk_create([
            cls.line_model(document=document, product_id=line.product_id, quantity=line.quantity)
            for line in line_set
        ])

    @classmethod
    @surface_storage_conflicts
    @transaction.atomic
    def create_document(
        cls,
        *,
        party,
        items=None,
        date=None,
        status=DocumentStatus.DRAFT,
        actor=None,
    ):
        """
        Create a document with its initial lines (possibly none). For
        deliveries each line is checked against live stock as it is added.
        """
        party = _clean_party(party)
        status = _clean_status(status)
        if status not in MUTABLE_STATUSES:
            raise InvalidInputError(detail=f'A new document cannot start as {status}.')

        line_set = cls.new_line_set()
        line_set.add_lines(items or [])

        document = cls.model.objects.create(
            code=SequenceService.next_code(cls.model),
            party=party,
            date=date or timezone.localdate(),
            status=status,
        )
        cls._write_lines(document, line_set)
        logger.info(
            '%s %s created party=%s lines=%s total=%s by=%s',
            cls._label(), document.code, party, len(line_set), line_set.total_quantity(), actor,
        )
        return document

    @classmethod
    @surface_storage_conflicts
    @transaction.atomic
    def update_document(
        cls,
        *,
        document_id,
        party=None,
        date=None,
        status=None,
        items=None,
        actor=None,
    ):
        """
        Edit header fields and, when `items` is given, replace every line.
        Stock is untouched; delivery sufficiency is enforced at validation.
        """
        document = cls._lock(document_id)
        _assert_editable(document)

        if party is not None:
            document.party = _clean_party(party)
        if date is not None:
            document.date = date
        if status is not None:
            status = _clean_status(status)
            _assert_transition(document, status)
            document.status = status
        document.save(update_fields=['party', 'date', 'status', 'updated_at'])

        if items is not None:
            line_set = LineSet.from_document(document, checker=cls.checker)
            line_set.replace_all(items)
            document.lines.all().delete()
            cls._write_lines(document, line_set)
            logger.info(
                '%s %s lines replaced lines=%s total=%s by=%s',
                cls._label(), document.code, len(line_set), line_set.total_quantity(), actor,
            )
        return document

    @classmethod
    @surface_storage_conflicts
    @transaction.atomic
    def validate_document(cls, *, document_id, actor=None):
        """
        Apply every line to product stock and move the document to DONE.

        All or nothing: product rows are locked in primary-key order, the
        whole line set is checked before the first write, and any failure
        rolls back every stock change. A DONE document is rejected with
        AlreadyValidatedError so a retried request cannot count stock twice.
        """
        document = cls._lock(document_id)
        if document.status == DocumentStatus.DONE:
            logger.warning('%s %s validation rejected: already done.', cls._label(), document.code)
            raise AlreadyValidatedError(detail=f'{document.code} has already been validated.')
        if document.status == DocumentStatus.CANCELED:
            raise InvalidStateTransition(detail=f'{document.code} is canceled and cannot be validated.')

        lines = list(document.lines.order_by('id'))
        if not lines:
            raise InvalidInputError(detail=f'{document.code} has no lines to validate.')

        product_ids = sorted({line.product_id for line in lines})
        stock_by_product = dict(
            Product.objects.select_for_update()
            .filter(pk__in=product_ids)
            .order_by('pk')
            .values_list('pk', 'stock')
        )
        direction = cls.model.STOCK_DIRECTION
        if direction < 0:
            try:
                StockAvailabilityChecker.check_lines(lines, stock_by_product)
            except InsufficientStockError as exc:
                logger.warning(
                    '%s %s validation rejected: product=%s available=%s requested=%s',
                    cls._label(), document.code, exc.product_id, exc.available, exc.requested,
                )
                raise

        for line in lines:
            try:
                ProductService.adjust_stock(
                    product_id=line.product_id,
                    delta=direction * line.quantity,
                )
            except InsufficientStockError as exc:
                raise StorageConflictError(
                    detail=f'Stock of product {exc.product_id} changed during validation of {document.code}.',
                ) from exc

        document.status = DocumentStatus.DONE
        document.save(update_fields=['status', 'updated_at'])
        logger.info(
            '%s %s validated lines=%s by=%s', cls._label(), document.code, len(lines), actor,
        )
        return document

    @classmethod
    @surface_storage_conflicts
    @transaction.atomic
    def delete_document(cls, *, document_id, actor=None) -> None:
        """
        Delete a document and its lines. DONE documents cannot be deleted;
        deletion never reverses stock.
        """
        document = cls._lock(document_id)
        if document.status == DocumentStatus.DONE:
            raise AlreadyValidatedError(
                detail=f'{document.code} has been validated and cannot be deleted.',
            )
        code = document.code
        document.delete()
        logger.info('%s %s deleted by=%s', cls._label(), code, actor)


class ReceiptService(DocumentService):
    """Receipts add their line quantities to stock on validation."""

    model = Receipt
    line_model = ReceiptLine


class DeliveryService(DocumentService):
    """Deliveries subtract their line quantities and never drive stock negative."""

    model = Delivery
    line_model = DeliveryLine
    checker = StockAvailabilityChecker
