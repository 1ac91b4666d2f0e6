"""
AgroSync Purchasing Engine — Order Code Numbering
===================================================
Order codes are PREFIX + zero-padded sequence (PED-000001).

The next sequence is derived from the codes already issued:
max numeric suffix + 1, or 1 when none exist. Codes that do not carry
the prefix followed by digits are ignored.

Stateless: given the same orders, always the same next code.
"""

from __future__ import annotations

from typing import Iterable, Optional

from core.config.settings import DEFAULT_ORDER_CODE_PREFIX, DEFAULT_ORDER_CODE_WIDTH


def parse_order_sequence(code: str, prefix: str = DEFAULT_ORDER_CODE_PREFIX) -> Optional[int]:
    """Numeric suffix of a well-formed code, else None."""
    if not isinstance(code, str) or not code.startswith(prefix):
        return None
    suffix = code[len(prefix):]
    if not suffix.isdigit():
        return None
    return int(suffix)


def format_order_code(
    sequence: int,
    prefix: str = DEFAULT_ORDER_CODE_PREFIX,
    width: int = DEFAULT_ORDER_CODE_WIDTH,
) -> str:
    if not isinstance(sequence, int) or sequence < 1:
        raise ValueError("sequence must be int >= 1.")
    return f"{prefix}{sequence:0{width}d}"


def next_order_code(
    codes: Iterable[str],
    prefix: str = DEFAULT_ORDER_CODE_PREFIX,
    width: int = DEFAULT_ORDER_CODE_WIDTH,
) -> str:
    highest = 0
    for code in codes:
        sequence = parse_order_sequence(code, prefix)
        if sequence is not None and sequence > highest:
            highest = sequence
    return format_order_code(highest + 1, prefix, width)
