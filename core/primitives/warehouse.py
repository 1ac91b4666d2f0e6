"""
AgroSync Warehouse Primitive — Items and Stock History
========================================================
A WarehouseItem's stock_quantity is the running sum of its
append-only stock_history. Every entry records the delta, the level
after applying it, and why it happened.

Entries are appended by the stock ledger (engines.warehouse) only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from core.primitives.values import ZERO, to_decimal, to_number
from core.time.temporal import (
    format_datetime,
    format_optional_datetime,
    parse_datetime,
    parse_optional_datetime,
)


# ══════════════════════════════════════════════════════════════
# STOCK REASON
# ══════════════════════════════════════════════════════════════

class StockReason(Enum):
    INITIAL_ENTRY = "Initial Entry"
    INVOICE_ENTRY = "Invoice Entry"
    MAINTENANCE_EXIT = "Maintenance Exit"
    MAINTENANCE_EDIT_ADJUSTMENT = "Maintenance-Edit Adjustment"
    MANUAL_ADJUSTMENT = "Manual Adjustment"
    PURCHASE_RECEIPT = "Purchase Receipt"


# Reason labels written by earlier versions of the stored document.
_LEGACY_REASONS = {
    "Entrada Inicial": StockReason.INITIAL_ENTRY,
    "Entrada via Nota Fiscal": StockReason.INVOICE_ENTRY,
    "Saída Manutenção": StockReason.MAINTENANCE_EXIT,
    "Ajuste Edição Manutenção": StockReason.MAINTENANCE_EDIT_ADJUSTMENT,
    "Ajuste Manual de Estoque": StockReason.MANUAL_ADJUSTMENT,
}

_LEGACY_PURCHASE_PREFIX = "Entrada Compra"


def parse_reason(value: str) -> StockReason:
    if value in _LEGACY_REASONS:
        return _LEGACY_REASONS[value]
    if value.startswith(_LEGACY_PURCHASE_PREFIX):
        return StockReason.PURCHASE_RECEIPT
    return StockReason(value)


# ══════════════════════════════════════════════════════════════
# STOCK HISTORY ENTRY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StockHistoryEntry:
    """
    One stock movement.

    Fields:
        date:             When the movement was recorded
        quantity_change:  Signed delta, never zero
        new_stock_level:  Running total after this entry
        reason:           Why stock moved
        reference_id:     Maintenance log id or purchase order id
        reference_code:   Purchase order code (PED-NNNNNN)
        invoice_number:   Supplier invoice for invoice entries
    """
    date: datetime
    quantity_change: Decimal
    new_stock_level: Decimal
    reason: StockReason
    reference_id: Optional[str] = None
    reference_code: Optional[str] = None
    invoice_number: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.date, datetime):
            raise TypeError("date must be datetime.")
        if not isinstance(self.quantity_change, Decimal):
            raise TypeError("quantity_change must be Decimal.")
        if self.quantity_change == 0:
            raise ValueError("quantity_change cannot be zero.")
        if not isinstance(self.new_stock_level, Decimal):
            raise TypeError("new_stock_level must be Decimal.")
        if not isinstance(self.reason, StockReason):
            raise ValueError("reason must be StockReason enum.")

    def to_dict(self) -> dict:
        data = {
            "date": format_datetime(self.date),
            "quantityChange": to_number(self.quantity_change),
            "newStockLevel": to_number(self.new_stock_level),
            "reason": self.reason.value,
        }
        if self.reference_id is not None:
            data["referenceId"] = self.reference_id
        if self.reference_code is not None:
            data["referenceCode"] = self.reference_code
        if self.invoice_number is not None:
            data["invoiceNumber"] = self.invoice_number
        return data

    @classmethod
    def from_dict(cls, data: dict) -> StockHistoryEntry:
        reason_text = data["reason"]
        reference_code = data.get("referenceCode")
        if reference_code is None and reason_text.startswith(_LEGACY_PURCHASE_PREFIX):
            reference_code = reason_text[len(_LEGACY_PURCHASE_PREFIX):].strip() or None
        return cls(
            date=parse_datetime(data["date"]),
            quantity_change=to_decimal(data["quantityChange"]),
            new_stock_level=to_decimal(data["newStockLevel"]),
            reason=parse_reason(reason_text),
            reference_id=data.get("referenceId"),
            reference_code=reference_code,
            invoice_number=data.get("invoiceNumber"),
        )


# ══════════════════════════════════════════════════════════════
# WAREHOUSE ITEM
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class WarehouseItem:
    """A stocked part or consumable (filters, oil, hoses...)."""
    id: str
    code: str
    name: str
    unit_value: Decimal = ZERO
    stock_quantity: Decimal = ZERO
    created_at: Optional[datetime] = None
    stock_history: Tuple[StockHistoryEntry, ...] = ()

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("id must be a non-empty string.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string.")
        if not isinstance(self.unit_value, Decimal):
            raise TypeError("unit_value must be Decimal.")
        if not isinstance(self.stock_quantity, Decimal):
            raise TypeError("stock_quantity must be Decimal.")
        if not isinstance(self.stock_history, tuple):
            raise TypeError("stock_history must be a tuple.")

    @property
    def history_total(self) -> Decimal:
        """Sum of all recorded deltas. Equals stock_quantity when consistent."""
        return sum((e.quantity_change for e in self.stock_history), ZERO)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "unitValue": to_number(self.unit_value),
            "stockQuantity": to_number(self.stock_quantity),
            "createdAt": format_optional_datetime(self.created_at),
            "stockHistory": [e.to_dict() for e in self.stock_history],
        }

    @classmethod
    def from_dict(cls, data: dict) -> WarehouseItem:
        return cls(
            id=data["id"],
            code=data.get("code") or "",
            name=data["name"],
            unit_value=to_decimal(data.get("unitValue", 0)),
            stock_quantity=to_decimal(data.get("stockQuantity", 0)),
            created_at=parse_optional_datetime(data.get("createdAt")),
            stock_history=tuple(
                StockHistoryEntry.from_dict(e)
                for e in data.get("stockHistory") or ()
            ),
        )
