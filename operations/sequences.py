"""
Operations — Document Code Sequences

Human-readable sequential codes (RCP-001, DEL-001) from a locked counter
row per document type. The counter is incremented inside the caller's
transaction, so a rolled-back creation does not consume a value, and it
never goes down, so codes of deleted documents are not reused.

@file operations/sequences.py
"""

import logging

from django.conf import settings
from django.db import transaction

from .models import DocumentSequence

logger = logging.getLogger('stockflow')


def format_code(prefix: str, value: int, width: int | None = None) -> str:
    width = width if width is not None else settings.DOCUMENT_CODE_WIDTH
    return f'{prefix}{value:0{width}d}'


class SequenceService:
    """Monotonic per-name counters."""

    @staticmethod
    @transaction.atomic
    def next_value(sequence_name: str) -> int:
        counter, _ = DocumentSequence.objects.select_for_update().get_or_create(name=sequence_name)
        counter.current_value += 1
        counter.save(update_fields=['current_value'])
        logger.debug('Sequence %s allocated %s', sequence_name, counter.current_value)
        return counter.current_value

    @staticmethod
    def next_code(document_model) -> str:
        value = SequenceService.next_value(document_model.SEQUENCE_NAME)
        return format_code(document_model.CODE_PREFIX, value)
