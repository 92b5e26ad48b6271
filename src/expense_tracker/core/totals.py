"""Total amount computation for transactions."""

from decimal import Decimal, InvalidOperation
from typing import Any

from expense_tracker.models.transaction import TaxType

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def coerce_decimal(value: Any) -> Decimal:
    """Normalize a user-supplied numeric value.

    Missing, unparseable, non-finite and negative values become zero
    instead of being rejected; range checks happen afterwards.

    >>> coerce_decimal("12.5")
    Decimal('12.5')
    >>> coerce_decimal("abc")
    Decimal('0')
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            number = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not number.is_finite() or number < 0:
        return ZERO
    return number


def compute_total(amount: Decimal, tax_type: TaxType | str, tax_amount: Decimal) -> Decimal:
    """Return the amount with tax applied.

    A percentage tax adds ``amount * tax_amount / 100``; any other tax type
    is treated as a flat amount added to ``amount``.
    """
    if tax_type == TaxType.PERCENTAGE:
        return amount + amount * tax_amount / HUNDRED
    return amount + tax_amount
