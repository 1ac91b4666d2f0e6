"""
AgroSync — Stock Ledger Tests
===============================
Running-total invariant, reason tags, zero-delta suppression and
tolerance of movements against deleted items.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.commands import InvalidQuantityError, ReasonCode
from core.primitives import PartUsage, StockReason, WarehouseItem
from engines.warehouse import (
    adjust_to,
    consumption_movements,
    edit_movements,
    open_item,
    post_movement,
    post_movements,
    receive_invoice,
    validate_parts,
    verify_history,
)

NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


def _item(item_id="item_1", quantity=10) -> WarehouseItem:
    return open_item(
        item_id=item_id, code="FLT-001", name="Oil filter",
        unit_value=Decimal("89.90"), initial_quantity=Decimal(quantity),
        created_at=NOW,
    )


# ══════════════════════════════════════════════════════════════
# SINGLE ITEM
# ══════════════════════════════════════════════════════════════

class TestOpenItem:
    def test_initial_entry(self):
        item = _item(quantity=10)
        assert item.stock_quantity == Decimal(10)
        assert len(item.stock_history) == 1
        assert item.stock_history[0].reason == StockReason.INITIAL_ENTRY
        assert item.stock_history[0].new_stock_level == Decimal(10)

    def test_zero_initial_stock_has_empty_history(self):
        item = _item(quantity=0)
        assert item.stock_history == ()
        assert item.created_at == NOW

    def test_negative_initial_stock_rejected(self):
        with pytest.raises(InvalidQuantityError) as exc_info:
            _item(quantity=-1)
        assert exc_info.value.reason.code == ReasonCode.INVALID_QUANTITY


class TestPostMovement:
    def test_zero_delta_returns_same_item(self):
        item = _item()
        assert post_movement(item, Decimal(0), StockReason.MANUAL_ADJUSTMENT, NOW) is item

    def test_stock_may_go_negative(self):
        item = post_movement(_item(quantity=2), Decimal(-5), StockReason.MAINTENANCE_EXIT, NOW)
        assert item.stock_quantity == Decimal(-3)
        assert verify_history(item)

    def test_invoice_receipt(self):
        item = receive_invoice(_item(), Decimal(4), "NF-1234", NOW)
        entry = item.stock_history[-1]
        assert entry.reason == StockReason.INVOICE_ENTRY
        assert entry.invoice_number == "NF-1234"
        assert item.stock_quantity == Decimal(14)

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_invoice_requires_positive(self, quantity):
        with pytest.raises(InvalidQuantityError, match="must be positive"):
            receive_invoice(_item(), Decimal(quantity), "NF-1", NOW)

    def test_manual_adjustment_records_difference(self):
        item = adjust_to(_item(quantity=10), Decimal(7), NOW)
        assert item.stock_history[-1].quantity_change == Decimal(-3)
        assert item.stock_history[-1].reason == StockReason.MANUAL_ADJUSTMENT
        assert verify_history(item)

    def test_manual_adjustment_to_same_value_adds_nothing(self):
        item = _item(quantity=10)
        assert adjust_to(item, Decimal(10), NOW).stock_history == item.stock_history


class TestVerifyHistory:
    def test_detects_inconsistent_total(self):
        from dataclasses import replace

        item = replace(_item(quantity=10), stock_quantity=Decimal(11))
        assert not verify_history(item)


# ══════════════════════════════════════════════════════════════
# MAINTENANCE MOVEMENTS
# ══════════════════════════════════════════════════════════════

class TestMaintenanceMovements:
    def test_consumption_aggregates_repeated_items(self):
        parts = [
            PartUsage("item_2", Decimal(1)),
            PartUsage("item_1", Decimal(2)),
            PartUsage("item_2", Decimal(3)),
        ]
        assert consumption_movements(parts) == [
            ("item_2", Decimal(-4)),
            ("item_1", Decimal(-2)),
        ]

    def test_validate_parts_rejects_zero(self):
        with pytest.raises(InvalidQuantityError, match="item_1"):
            validate_parts([PartUsage("item_1", Decimal(0))])

    def test_edit_from_three_to_five_is_minus_two(self):
        items = [_item("item_1", 3)]
        movements = edit_movements(
            [PartUsage("item_1", Decimal(3))],
            [PartUsage("item_1", Decimal(5))],
            items,
        )
        assert movements == [("item_1", Decimal(-2))]

    def test_removed_part_restored(self):
        items = [_item("item_1", 3), _item("item_2", 8)]
        movements = edit_movements(
            [PartUsage("item_1", Decimal(3)), PartUsage("item_2", Decimal(1))],
            [PartUsage("item_2", Decimal(1))],
            items,
        )
        assert movements == [("item_1", Decimal(3))]

    def test_edit_follows_warehouse_order(self):
        items = [_item("item_1", 3), _item("item_2", 8)]
        movements = edit_movements(
            [PartUsage("item_2", Decimal(1))],
            [PartUsage("item_1", Decimal(1))],
            items,
        )
        assert movements == [("item_1", Decimal(-1)), ("item_2", Decimal(1))]


# ══════════════════════════════════════════════════════════════
# FARM-WIDE POSTING
# ══════════════════════════════════════════════════════════════

class TestPostMovements:
    def test_one_entry_per_movement(self):
        items = (_item("item_1", 10),)
        result = post_movements(
            items,
            [("item_1", Decimal(6)), ("item_1", Decimal(4))],
            StockReason.PURCHASE_RECEIPT,
            NOW,
            reference_id="po_1",
            reference_code="PED-000001",
        )
        item = result.items[0]
        assert item.stock_quantity == Decimal(20)
        receipts = item.stock_history[1:]
        assert [e.new_stock_level for e in receipts] == [Decimal(16), Decimal(20)]
        assert all(e.reference_code == "PED-000001" for e in receipts)
        assert verify_history(item)

    def test_missing_item_skipped_and_reported(self, caplog):
        items = (_item("item_1", 10),)
        with caplog.at_level("WARNING", logger="agrosync.stock"):
            result = post_movements(
                items,
                [("item_gone", Decimal(-1)), ("item_1", Decimal(-1))],
                StockReason.MAINTENANCE_EXIT,
                NOW,
                reference_id="maint_1",
            )
        assert result.missing_item_ids == ("item_gone",)
        assert result.items[0].stock_quantity == Decimal(9)
        assert "item_gone" in caplog.text
