"""
AgroSync Core Config — Ledger Settings
========================================
Values the ledger needs at runtime: where the farm document is stored
and how purchase order codes are formatted.

Engines receive a LedgerSettings value; they never read Django settings
directly. `from_django_settings()` is the single bridge.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SNAPSHOT_KEY = "agrosync_farm"
DEFAULT_ORDER_CODE_PREFIX = "PED-"
DEFAULT_ORDER_CODE_WIDTH = 6


@dataclass(frozen=True)
class LedgerSettings:
    """
    Runtime configuration of the farm ledger.

    Fields:
        snapshot_key:       Store key under which the farm document lives
        order_code_prefix:  Prefix of purchase order codes (PED-)
        order_code_width:   Zero-padded digit count of the order number
    """

    snapshot_key: str = DEFAULT_SNAPSHOT_KEY
    order_code_prefix: str = DEFAULT_ORDER_CODE_PREFIX
    order_code_width: int = DEFAULT_ORDER_CODE_WIDTH

    def __post_init__(self) -> None:
        if not self.snapshot_key or not isinstance(self.snapshot_key, str):
            raise ValueError("snapshot_key must be a non-empty string.")
        if not self.order_code_prefix or not isinstance(self.order_code_prefix, str):
            raise ValueError("order_code_prefix must be a non-empty string.")
        if not isinstance(self.order_code_width, int) or self.order_code_width < 1:
            raise ValueError(
                f"order_code_width must be a positive int, got {self.order_code_width!r}."
            )

    @classmethod
    def from_django_settings(cls) -> LedgerSettings:
        """Read AGROSYNC_* values from django.conf.settings, falling back to defaults."""
        from django.conf import settings

        return cls(
            snapshot_key=getattr(
                settings, "AGROSYNC_SNAPSHOT_KEY", DEFAULT_SNAPSHOT_KEY,
            ),
            order_code_prefix=getattr(
                settings, "AGROSYNC_ORDER_CODE_PREFIX", DEFAULT_ORDER_CODE_PREFIX,
            ),
            order_code_width=int(getattr(
                settings, "AGROSYNC_ORDER_CODE_WIDTH", DEFAULT_ORDER_CODE_WIDTH,
            )),
        )
