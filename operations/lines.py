"""
Operations — Document Line Set

In-memory collection of (product, quantity) lines for one document while
it is being composed or edited. Lines are values: the same product may
appear several times and totals are always summed.

@file operations/lines.py
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from core.constants import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS, ZERO_QUANTITY
from core.exceptions import InvalidInputError
from inventory.services import ProductService

MAX_QUANTITY = Decimal(10) ** (QUANTITY_MAX_DIGITS - QUANTITY_DECIMAL_PLACES)


@dataclass(frozen=True)
class Line:
    product_id: int
    quantity: Decimal


def parse_quantity(value) -> Decimal:
    """Coerce to a positive, finite Decimal that fits the quantity column."""
    if isinstance(value, bool):
        raise InvalidInputError(detail='Quantity must be a number.')
    try:
        quantity = Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInputError(detail=f'Quantity {value!r} is not a number.')
    if not quantity.is_finite():
        raise InvalidInputError(detail='Quantity must be finite.')
    if quantity <= 0:
        raise InvalidInputError(detail='Quantity must be positive.')
    if quantity.as_tuple().exponent < -QUANTITY_DECIMAL_PLACES:
        raise InvalidInputError(
            detail=f'Quantity allows at most {QUANTITY_DECIMAL_PLACES} decimal places.',
        )
    if quantity >= MAX_QUANTITY:
        raise InvalidInputError(detail='Quantity is too large.')
    return quantity


def _unpack(entry):
    if isinstance(entry, Line):
        return entry.product_id, entry.quantity
    if isinstance(entry, Mapping):
        missing = [key for key in ('product_id', 'quantity') if entry.get(key) is None]
        if missing:
            raise InvalidInputError(detail=f'Line is missing {", ".join(missing)}.')
        return entry['product_id'], entry['quantity']
    try:
        product_id, quantity = entry
    except (TypeError, ValueError):
        raise InvalidInputError(detail='Each line must be a (product_id, quantity) pair.')
    return product_id, quantity


class LineSet:
    """
    Lines of one document.

    With a checker (deliveries), add_line refuses quantities beyond live
    stock minus what this set already reserves for the product. Without
    one (receipts), only product and quantity are checked.
    """

    def __init__(self, lines=(), *, checker=None):
        self._lines = list(lines)
        self._checker = checker

    @classmethod
    def from_document(cls, document, *, checker=None):
        return cls(
            (Line(line.product_id, line.quantity) for line in document.lines.all()),
            checker=checker,
        )

    def __iter__(self):
        return iter(self._lines)

    def __len__(self):
        return len(self._lines)

    def __getitem__(self, index):
        return self._lines[index]

    @property
    def lines(self) -> tuple:
        return tuple(self._lines)

    def reserved_for(self, product_id) -> Decimal:
        return sum(
            (line.quantity for line in self._lines if line.product_id == product_id),
            ZERO_QUANTITY,
        )

    def total_quantity(self) -> Decimal:
        return sum((line.quantity for line in self._lines), ZERO_QUANTITY)

    def _resolve(self, product_id, quantity) -> Line:
        product = ProductService.get_product(product_id)
        return Line(product.pk, parse_quantity(quantity))

    def add_line(self, product_id, quantity) -> Line:
        line = self._resolve(product_id, quantity)
        if self._checker is not None:
            self._checker.ensure_available(
                line.product_id, line.quantity,
                already_reserved=self.reserved_for(line.product_id),
            )
        self._lines.append(line)
        return line

    def add_lines(self, entries) -> None:
        for entry in entries:
            self.add_line(*_unpack(entry))

    def remove_line(self, index: int) -> Line:
        if not isinstance(index, int) or not 0 <= index < len(self._lines):
            raise InvalidInputError(detail=f'No line at position {index}.')
        return self._lines.pop(index)

    def replace_all(self, entries) -> None:
        """
        Discard every line and install `entries`. Products and quantities
        are checked; stock is not, since it is enforced at validation.
        """
        new_lines = [self._resolve(*_unpack(entry)) for entry in entries]
        self._lines = new_lines
