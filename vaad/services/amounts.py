"""Monetary value coercion and rounding helpers.

Stored amounts are not validated on write, so every engine reads them through
``to_amount``: a value that is missing or is not a finite number yields ``None``
and the caller skips the record instead of poisoning a running total.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_amount(value: Any) -> Decimal | None:
    """Coerce a stored amount to Decimal.

    Returns:
        Decimal value, or None if the value is missing, non-numeric or not finite

    Example:
        >>> to_amount("450")
        Decimal('450')
        >>> to_amount("abc") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, (int, float)):
            amount = Decimal(str(value))
        elif isinstance(value, str):
            amount = Decimal(value.strip())
        else:
            return None
    except InvalidOperation:
        return None

    if not amount.is_finite():
        return None
    return amount


def record_amount(record: Any, field: str, source: str) -> Decimal | None:
    """Read ``record.<field>`` as an amount, logging when the record must be skipped.

    Args:
        record: Ledger record (ORM object or any object with the attribute)
        field: Attribute holding the amount
        source: Ledger name for the log message

    Returns:
        Decimal amount or None if the record is unusable
    """
    raw = getattr(record, field, None)
    amount = to_amount(raw)
    if amount is None:
        logger.warning(
            "Skipping %s record id=%s: malformed %s=%r",
            source,
            getattr(record, "id", "?"),
            field,
            raw,
        )
    return amount


def round_percentage(part: Decimal, total: Decimal) -> int:
    """Whole-number share of ``part`` in ``total``, rounded half up.

    A zero total yields 0 for every part.
    """
    if total == ZERO:
        return 0
    return int((part / total * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


__all__ = ["ZERO", "HUNDRED", "to_amount", "record_amount", "round_percentage"]
