"""
AgroSync Purchasing Primitive — Purchase Orders
=================================================
A PurchaseOrder requests warehouse items from suppliers and moves through
PENDING → APPROVED → FULFILLED, or to CANCELLED before fulfillment.

Actor and timestamp of each step are recorded on the order itself.
Transition rules live in engines.purchasing; this file holds data only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from core.primitives.values import to_decimal, to_number
from core.time.temporal import (
    format_datetime,
    format_optional_datetime,
    parse_datetime,
    parse_optional_datetime,
)


class PurchaseOrderStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    FULFILLED = "FULFILLED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class PurchaseOrderLine:
    item_id: str
    quantity: Decimal

    def __post_init__(self):
        if not self.item_id or not isinstance(self.item_id, str):
            raise ValueError("item_id must be a non-empty string.")
        if not isinstance(self.quantity, Decimal):
            raise TypeError("quantity must be Decimal.")

    def to_dict(self) -> dict:
        return {"itemId": self.item_id, "quantity": to_number(self.quantity)}

    @classmethod
    def from_dict(cls, data: dict) -> PurchaseOrderLine:
        return cls(item_id=data["itemId"], quantity=to_decimal(data["quantity"]))


# Optional audit fields: (attribute, document key, is_date)
_AUDIT_FIELDS = (
    ("approval_date", "approvalDate", True),
    ("approved_by_id", "approvedById", False),
    ("fulfilled_date", "fulfilledDate", True),
    ("fulfilled_by_id", "fulfilledById", False),
    ("cancellation_date", "cancellationDate", True),
    ("cancelled_by_id", "cancelledById", False),
    ("cancellation_reason", "cancellationReason", False),
)


@dataclass(frozen=True)
class PurchaseOrder:
    """
    A request to buy warehouse items.

    Fields:
        id:            Unique order id
        code:          Human-facing sequential code (PED-000001)
        status:        Current lifecycle state
        request_date:  When the order was placed
        requester_id:  Collaborator who placed it
        items:         Ordered lines (item, quantity)
        notes:         Free text

    Approval, fulfillment and cancellation fields are filled in by
    the matching transition and are None until then.
    """
    id: str
    code: str
    status: PurchaseOrderStatus
    request_date: datetime
    requester_id: str
    items: Tuple[PurchaseOrderLine, ...]
    notes: str = ""
    approval_date: Optional[datetime] = None
    approved_by_id: Optional[str] = None
    fulfilled_date: Optional[datetime] = None
    fulfilled_by_id: Optional[str] = None
    cancellation_date: Optional[datetime] = None
    cancelled_by_id: Optional[str] = None
    cancellation_reason: Optional[str] = None

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("id must be a non-empty string.")
        if not isinstance(self.status, PurchaseOrderStatus):
            raise ValueError("status must be PurchaseOrderStatus enum.")
        if not isinstance(self.request_date, datetime):
            raise TypeError("request_date must be datetime.")
        if not isinstance(self.items, tuple):
            raise TypeError("items must be a tuple.")

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "code": self.code,
            "status": self.status.value,
            "requestDate": format_datetime(self.request_date),
            "requesterId": self.requester_id,
            "items": [line.to_dict() for line in self.items],
            "notes": self.notes,
        }
        for attr, key, is_date in _AUDIT_FIELDS:
            value = getattr(self, attr)
            if value is None:
                continue
            data[key] = format_optional_datetime(value) if is_date else value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> PurchaseOrder:
        audit = {}
        for attr, key, is_date in _AUDIT_FIELDS:
            value = data.get(key)
            audit[attr] = parse_optional_datetime(value) if is_date else value
        return cls(
            id=data["id"],
            code=data.get("code") or "",
            status=PurchaseOrderStatus(data["status"]),
            request_date=parse_datetime(data["requestDate"]),
            requester_id=data.get("requesterId") or "",
            items=tuple(
                PurchaseOrderLine.from_dict(line) for line in data.get("items") or ()
            ),
            notes=data.get("notes") or "",
            **audit,
        )
