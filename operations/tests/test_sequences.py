"""
Tests — document code sequences.

@file operations/tests/test_sequences.py
"""

import pytest
from django.test import override_settings

from operations.models import Delivery, DocumentSequence, Receipt
from operations.sequences import SequenceService, format_code


class TestFormatCode:

    def test_pads_to_width(self):
        assert format_code('RCP-', 1, width=3) == 'RCP-001'

    def test_grows_past_width(self):
        assert format_code('DEL-', 1234, width=3) == 'DEL-1234'

    @override_settings(DOCUMENT_CODE_WIDTH=5)
    def test_width_from_settings(self):
        assert format_code('RCP-', 42) == 'RCP-00042'


@pytest.mark.django_db
class TestSequenceService:

    def test_receipt_codes_sequential(self):
        codes = [SequenceService.next_code(Receipt) for _ in range(3)]
        assert codes == ['RCP-001', 'RCP-002', 'RCP-003']

    def test_counters_independent_per_type(self):
        SequenceService.next_code(Receipt)
        SequenceService.next_code(Receipt)
        assert SequenceService.next_code(Delivery) == 'DEL-001'

    def test_counter_row_holds_last_value(self):
        SequenceService.next_code(Delivery)
        SequenceService.next_code(Delivery)
        assert DocumentSequence.objects.get(name='delivery').current_value == 2
