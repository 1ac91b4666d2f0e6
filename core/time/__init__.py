"""
AgroSync Core Time — Public API
=================================
Injectable clock and date helpers.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
)
from core.time.temporal import (
    TimeWindow,
    as_utc,
    format_datetime,
    format_optional_datetime,
    parse_datetime,
    parse_optional_datetime,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "TimeWindow",
    "as_utc",
    "parse_datetime",
    "parse_optional_datetime",
    "format_datetime",
    "format_optional_datetime",
]
