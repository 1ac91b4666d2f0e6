"""
AgroSync Warehouse Engine — Stock Ledger
==========================================
Stock quantity is the running sum of an append-only history of deltas.

| Movement                     | Delta                    | Reason                      |
|------------------------------|--------------------------|-----------------------------|
| Item created                 | +initial quantity        | Initial Entry               |
| Invoice received             | +quantity                | Invoice Entry               |
| Maintenance log created      | -quantity per item       | Maintenance Exit            |
| Maintenance log edited       | old - new per item       | Maintenance-Edit Adjustment |
| Manual correction            | new - old                | Manual Adjustment           |
| Purchase order fulfilled     | +quantity per order line | Purchase Receipt            |

Rules:
- A zero delta appends nothing.
- Every non-zero delta appends exactly one entry whose new_stock_level
  continues the running total.
- Stock may go negative (consumption is recorded, never blocked).
- A delta for an item that no longer exists is skipped and reported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.commands.errors import InvalidQuantityError
from core.primitives.logs import PartUsage
from core.primitives.values import ZERO
from core.primitives.warehouse import StockHistoryEntry, StockReason, WarehouseItem

logger = logging.getLogger("agrosync.stock")

POLICY_NAME = "stock_ledger"

Movement = Tuple[str, Decimal]


# ══════════════════════════════════════════════════════════════
# SINGLE-ITEM POSTING
# ══════════════════════════════════════════════════════════════

def post_movement(
    item: WarehouseItem,
    delta: Decimal,
    reason: StockReason,
    at: datetime,
    *,
    reference_id: Optional[str] = None,
    reference_code: Optional[str] = None,
    invoice_number: Optional[str] = None,
) -> WarehouseItem:
    """Append one entry and move stock_quantity by delta. Zero delta = unchanged item."""
    if delta == 0:
        return item
    new_level = item.stock_quantity + delta
    entry = StockHistoryEntry(
        date=at,
        quantity_change=delta,
        new_stock_level=new_level,
        reason=reason,
        reference_id=reference_id,
        reference_code=reference_code,
        invoice_number=invoice_number,
    )
    return replace(
        item,
        stock_quantity=new_level,
        stock_history=item.stock_history + (entry,),
    )


def open_item(
    *,
    item_id: str,
    code: str,
    name: str,
    unit_value: Decimal,
    initial_quantity: Decimal,
    created_at: datetime,
) -> WarehouseItem:
    """New item whose history starts with its Initial Entry (if non-zero)."""
    if initial_quantity < 0:
        raise InvalidQuantityError(
            f"Initial stock cannot be negative, got {initial_quantity}.",
            policy_name=POLICY_NAME,
        )
    item = WarehouseItem(
        id=item_id,
        code=code,
        name=name,
        unit_value=unit_value,
        stock_quantity=ZERO,
        created_at=created_at,
    )
    return post_movement(item, initial_quantity, StockReason.INITIAL_ENTRY, created_at)


def receive_invoice(
    item: WarehouseItem,
    quantity: Decimal,
    invoice_number: str,
    at: datetime,
) -> WarehouseItem:
    if quantity <= 0:
        raise InvalidQuantityError(
            f"Invoice quantity must be positive, got {quantity}.",
            policy_name=POLICY_NAME,
        )
    return post_movement(
        item, quantity, StockReason.INVOICE_ENTRY, at,
        invoice_number=invoice_number,
    )


def adjust_to(item: WarehouseItem, new_quantity: Decimal, at: datetime) -> WarehouseItem:
    """Manual correction: record new - old so the history still sums to stock."""
    return post_movement(
        item, new_quantity - item.stock_quantity, StockReason.MANUAL_ADJUSTMENT, at,
    )


# ══════════════════════════════════════════════════════════════
# MAINTENANCE CONSUMPTION
# ══════════════════════════════════════════════════════════════

def validate_parts(parts: Iterable[PartUsage]) -> None:
    for part in parts:
        if part.quantity <= 0:
            raise InvalidQuantityError(
                f"Part quantity for item '{part.item_id}' must be positive, "
                f"got {part.quantity}.",
                policy_name=POLICY_NAME,
            )


def consumption_movements(parts: Sequence[PartUsage]) -> List[Movement]:
    """Negative movement per item, repeated items summed, first appearance order."""
    totals: Dict[str, Decimal] = {}
    for part in parts:
        totals[part.item_id] = totals.get(part.item_id, ZERO) + part.quantity
    return [(item_id, -quantity) for item_id, quantity in totals.items()]


def edit_movements(
    old_parts: Sequence[PartUsage],
    new_parts: Sequence[PartUsage],
    items: Sequence[WarehouseItem],
) -> List[Movement]:
    """
    Net correction per item for an edited service: old quantity - new quantity.

    Items are visited in warehouse order; ids referenced by the log but
    absent from the warehouse follow in first-appearance order.
    """
    net: Dict[str, Decimal] = {}
    for part in old_parts:
        net[part.item_id] = net.get(part.item_id, ZERO) + part.quantity
    for part in new_parts:
        net[part.item_id] = net.get(part.item_id, ZERO) - part.quantity

    ordered = [item.id for item in items if item.id in net]
    ordered += [item_id for item_id in net if item_id not in ordered]
    return [(item_id, net[item_id]) for item_id in ordered if net[item_id] != 0]


# ══════════════════════════════════════════════════════════════
# FARM-WIDE POSTING
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PostingResult:
    items: Tuple[WarehouseItem, ...]
    missing_item_ids: Tuple[str, ...] = ()


def post_movements(
    items: Tuple[WarehouseItem, ...],
    movements: Iterable[Movement],
    reason: StockReason,
    at: datetime,
    *,
    reference_id: Optional[str] = None,
    reference_code: Optional[str] = None,
) -> PostingResult:
    """
    Apply movements to a warehouse collection, one entry per non-zero movement.

    Movements against unknown items are skipped; their ids are returned
    and logged.
    """
    index = {item.id: position for position, item in enumerate(items)}
    updated = list(items)
    missing: List[str] = []

    for item_id, delta in movements:
        position = index.get(item_id)
        if position is None:
            if item_id not in missing:
                missing.append(item_id)
            continue
        updated[position] = post_movement(
            updated[position], delta, reason, at,
            reference_id=reference_id,
            reference_code=reference_code,
        )

    for item_id in missing:
        logger.warning(
            f"Stock movement ({reason.value}, ref {reference_id}) skipped: "
            f"warehouse item '{item_id}' not found"
        )

    return PostingResult(items=tuple(updated), missing_item_ids=tuple(missing))


def verify_history(item: WarehouseItem) -> bool:
    """True when stock equals the history sum and every running level is consistent."""
    running = ZERO
    for entry in item.stock_history:
        running += entry.quantity_change
        if entry.new_stock_level != running:
            return False
    return running == item.stock_quantity
