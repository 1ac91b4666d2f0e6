"""
AgroSync Value Helpers — Decimal Quantities and Money
=======================================================
Quantities, hour-meter readings and money are Decimal inside the ledger.
The stored document carries plain JSON numbers; these helpers convert
at the boundary so float noise never accumulates in running totals.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

Number = Union[int, float]

ZERO = Decimal(0)


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON number, numeric string or Decimal to Decimal."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError("Boolean is not a numeric value.")
    if isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Not a numeric value: {value!r}.") from None
        if not result.is_finite():
            raise ValueError(f"Numeric value must be finite, got {value!r}.")
        return result
    raise ValueError(f"Not a numeric value: {value!r}.")


def to_optional_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return to_decimal(value)


def to_number(value: Decimal) -> Number:
    """Serialize a Decimal as int when integral, float otherwise."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def to_optional_number(value: Optional[Decimal]) -> Optional[Number]:
    return to_number(value) if value is not None else None
