"""
AgroSync Core Time — Temporal Helpers
=======================================
Pure functions for date parsing, formatting and windows.

The stored farm document carries dates as ISO-8601 strings, either full
timestamps ("2024-03-01T10:15:00.000Z") or plain dates ("2024-03-01").
Everything inside the ledger is a timezone-aware datetime; naive values
are read as UTC.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Optional, Union

DateLike = Union[str, date, datetime]


# ══════════════════════════════════════════════════════════════
# PARSE / FORMAT
# ══════════════════════════════════════════════════════════════

def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: DateLike) -> datetime:
    """
    Parse a stored date into an aware UTC datetime.

    Accepts datetime, date, or ISO-8601 strings (a trailing 'Z' is allowed).
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Cannot parse date from {value!r}.")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        raise ValueError(f"Invalid ISO-8601 date: {value!r}.") from None


def parse_optional_datetime(value: Optional[DateLike]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return parse_datetime(value)


def format_datetime(value: datetime) -> str:
    """Serialize as ISO-8601 UTC with millisecond precision and 'Z'."""
    dt = as_utc(value)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def format_optional_datetime(value: Optional[datetime]) -> Optional[str]:
    return format_datetime(value) if value is not None else None


# ══════════════════════════════════════════════════════════════
# TIME WINDOW
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TimeWindow:
    """
    A closed time interval [start, end].

    Invariant: start <= end (enforced at construction).
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"TimeWindow start ({self.start}) must be <= end ({self.end})."
            )

    @classmethod
    def for_days(cls, first_day: DateLike, last_day: DateLike) -> TimeWindow:
        """Whole-day window: first_day 00:00:00 through last_day 23:59:59.999999 UTC."""
        start = parse_datetime(first_day).replace(
            hour=0, minute=0, second=0, microsecond=0,
        )
        end = parse_datetime(last_day).replace(
            hour=23, minute=59, second=59, microsecond=999999,
        )
        return cls(start=start, end=end)

    def contains(self, dt: datetime) -> bool:
        """Check if datetime falls within window (inclusive)."""
        return self.start <= as_utc(dt) <= self.end

    def day_index(self, dt: datetime) -> int:
        """1-based day number of dt counted from the window start."""
        return (as_utc(dt).date() - self.start.date()).days + 1
