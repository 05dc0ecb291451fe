"""
Core — Constants

@file core/constants.py
"""

from decimal import Decimal

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100

# Quantities and stock are stored with three decimal places (kg, l, m, ...).
QUANTITY_MAX_DIGITS = 14
QUANTITY_DECIMAL_PLACES = 3
ZERO_QUANTITY = Decimal('0')
