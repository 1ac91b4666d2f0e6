"""
AgroSync — Purchase Order Workflow Tests
==========================================
Code numbering and the PENDING → APPROVED → FULFILLED / CANCELLED lifecycle.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from core.commands import InvalidQuantityError, InvalidTransitionError
from core.primitives import PurchaseOrderLine, PurchaseOrderStatus
from engines.purchasing import (
    PURCHASE_ORDER_WORKFLOW,
    format_order_code,
    next_order_code,
    parse_order_sequence,
    place_order,
    transition,
)

NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)
LATER = NOW + timedelta(hours=3)


def _order(**overrides):
    values = dict(
        order_id="po_1",
        code="PED-000001",
        requester_id="collab_1",
        lines=[
            PurchaseOrderLine("item_1", Decimal(6)),
            PurchaseOrderLine("item_2", Decimal(2)),
        ],
        requested_at=NOW,
    )
    values.update(overrides)
    return place_order(**values)


# ══════════════════════════════════════════════════════════════
# NUMBERING
# ══════════════════════════════════════════════════════════════

class TestNumbering:
    def test_first_code(self):
        assert next_order_code([]) == "PED-000001"

    def test_max_plus_one_not_count_plus_one(self):
        assert next_order_code(["PED-000001", "PED-000003"]) == "PED-000004"

    def test_malformed_codes_ignored(self):
        assert next_order_code(["PED-000002", "PED-abc", "", "OLD-9"]) == "PED-000003"

    def test_parse(self):
        assert parse_order_sequence("PED-000042") == 42
        assert parse_order_sequence("PED-") is None

    def test_custom_prefix_and_width(self):
        assert next_order_code(["PO-07"], prefix="PO-", width=2) == "PO-08"

    def test_format_rejects_zero(self):
        with pytest.raises(ValueError, match="sequence"):
            format_order_code(0)


# ══════════════════════════════════════════════════════════════
# CREATION
# ══════════════════════════════════════════════════════════════

class TestPlaceOrder:
    def test_starts_pending(self):
        order = _order()
        assert order.status == PurchaseOrderStatus.PENDING
        assert order.request_date == NOW
        assert order.approval_date is None

    def test_requires_lines(self):
        with pytest.raises(InvalidQuantityError, match="at least one item"):
            _order(lines=[])

    def test_requires_positive_quantities(self):
        with pytest.raises(InvalidQuantityError, match="item_1"):
            _order(lines=[PurchaseOrderLine("item_1", Decimal(0))])


# ══════════════════════════════════════════════════════════════
# TRANSITIONS
# ══════════════════════════════════════════════════════════════

class TestWorkflowDefinition:
    def test_terminal_states(self):
        assert PURCHASE_ORDER_WORKFLOW.is_terminal(PurchaseOrderStatus.FULFILLED)
        assert PURCHASE_ORDER_WORKFLOW.is_terminal(PurchaseOrderStatus.CANCELLED)
        assert not PURCHASE_ORDER_WORKFLOW.is_terminal(PurchaseOrderStatus.PENDING)

    def test_pending_may_skip_approval(self):
        assert PURCHASE_ORDER_WORKFLOW.is_valid_transition(
            PurchaseOrderStatus.PENDING, PurchaseOrderStatus.FULFILLED,
        )


class TestTransition:
    def test_approve(self):
        result = transition(
            _order(), PurchaseOrderStatus.APPROVED, actor_id="collab_9", at=LATER,
        )
        assert result.changed
        assert result.order.status == PurchaseOrderStatus.APPROVED
        assert result.order.approval_date == LATER
        assert result.order.approved_by_id == "collab_9"
        assert result.stock_credits == ()

    def test_fulfill_pending_backfills_approval(self):
        result = transition(
            _order(), PurchaseOrderStatus.FULFILLED, actor_id="collab_9", at=LATER,
        )
        order = result.order
        assert order.approval_date == order.fulfilled_date == LATER
        assert order.approved_by_id == order.fulfilled_by_id == "collab_9"
        assert result.stock_credits == (("item_1", Decimal(6)), ("item_2", Decimal(2)))

    def test_fulfill_approved_keeps_original_approval(self):
        approved = transition(
            _order(), PurchaseOrderStatus.APPROVED, actor_id="collab_2", at=NOW,
        ).order
        order = transition(
            approved, PurchaseOrderStatus.FULFILLED, actor_id="collab_9", at=LATER,
        ).order
        assert order.approval_date == NOW
        assert order.approved_by_id == "collab_2"
        assert order.fulfilled_by_id == "collab_9"

    def test_refulfill_is_noop(self):
        fulfilled = transition(
            _order(), PurchaseOrderStatus.FULFILLED, actor_id="collab_9", at=NOW,
        ).order
        result = transition(
            fulfilled, PurchaseOrderStatus.FULFILLED, actor_id="collab_9", at=LATER,
        )
        assert not result.changed
        assert result.order is fulfilled
        assert result.stock_credits == ()

    def test_cancel_pending(self):
        result = transition(
            _order(), PurchaseOrderStatus.CANCELLED,
            actor_id="collab_9", at=LATER, reason="Supplier out of stock",
        )
        assert result.order.status == PurchaseOrderStatus.CANCELLED
        assert result.order.cancellation_reason == "Supplier out of stock"
        assert result.order.cancelled_by_id == "collab_9"
        assert result.stock_credits == ()

    def test_cancel_fulfilled_rejected(self):
        fulfilled = transition(
            _order(), PurchaseOrderStatus.FULFILLED, actor_id="collab_9", at=NOW,
        ).order
        with pytest.raises(InvalidTransitionError, match="FULFILLED to CANCELLED"):
            transition(
                fulfilled, PurchaseOrderStatus.CANCELLED, actor_id="collab_9", at=LATER,
            )

    @pytest.mark.parametrize("target", [
        PurchaseOrderStatus.APPROVED,
        PurchaseOrderStatus.FULFILLED,
        PurchaseOrderStatus.CANCELLED,
    ])
    def test_nothing_leaves_cancelled(self, target):
        cancelled = transition(
            _order(), PurchaseOrderStatus.CANCELLED, actor_id="collab_9", at=NOW,
        ).order
        with pytest.raises(InvalidTransitionError):
            transition(cancelled, target, actor_id="collab_9", at=LATER)

    def test_approve_twice_rejected(self):
        approved = transition(
            _order(), PurchaseOrderStatus.APPROVED, actor_id="collab_2", at=NOW,
        ).order
        with pytest.raises(InvalidTransitionError):
            transition(approved, PurchaseOrderStatus.APPROVED, actor_id="collab_2", at=LATER)

    def test_back_to_pending_rejected(self):
        with pytest.raises(InvalidTransitionError):
            transition(_order(), PurchaseOrderStatus.PENDING, actor_id="collab_2", at=LATER)
