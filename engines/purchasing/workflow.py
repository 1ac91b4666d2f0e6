"""
AgroSync Purchasing Engine — Purchase Order State Machine
===========================================================
    PENDING  → APPROVED | FULFILLED | CANCELLED
    APPROVED → FULFILLED | CANCELLED

FULFILLED and CANCELLED are terminal.

Each transition stamps its actor and timestamp on the order:
    APPROVED   → approval_date, approved_by_id
    FULFILLED  → fulfilled_date, fulfilled_by_id (approval backfilled
                 with the same actor/time when the order was never approved);
                 one stock credit per order line
    CANCELLED  → cancellation_date, cancelled_by_id, cancellation_reason

Requesting FULFILLED on a FULFILLED order is an accepted no-op.
Any other disallowed move raises InvalidTransitionError.

This file contains NO persistence logic and NO stock posting; it returns
the stock credits for the caller to post.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Dict, FrozenSet, Optional, Sequence, Tuple

from core.commands.errors import InvalidQuantityError, InvalidTransitionError
from core.primitives.purchasing import (
    PurchaseOrder,
    PurchaseOrderLine,
    PurchaseOrderStatus,
)

logger = logging.getLogger("agrosync.purchasing")

POLICY_NAME = "purchase_order_workflow"


# ══════════════════════════════════════════════════════════════
# WORKFLOW DEFINITION
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class WorkflowDefinition:
    """
    Valid states and transitions of a lifecycle.

    Fields:
        name:            Identifier (e.g. "PurchaseOrder")
        initial_state:   State of every new instance
        terminal_states: States with no outgoing transitions
        transitions:     {from_state → frozenset(allowed to_states)}
    """
    name: str
    initial_state: PurchaseOrderStatus
    terminal_states: FrozenSet[PurchaseOrderStatus]
    transitions: Dict[PurchaseOrderStatus, FrozenSet[PurchaseOrderStatus]]

    def __post_init__(self):
        if not self.name:
            raise ValueError("Workflow name must be non-empty.")
        if self.initial_state not in self.transitions:
            raise ValueError(
                f"initial_state '{self.initial_state.value}' not in transitions."
            )
        for state in self.terminal_states:
            if self.transitions.get(state):
                raise ValueError(
                    f"Terminal state '{state.value}' cannot have transitions."
                )

    def is_valid_transition(
        self, from_state: PurchaseOrderStatus, to_state: PurchaseOrderStatus,
    ) -> bool:
        return to_state in self.transitions.get(from_state, frozenset())

    def is_terminal(self, state: PurchaseOrderStatus) -> bool:
        return state in self.terminal_states


PURCHASE_ORDER_WORKFLOW = WorkflowDefinition(
    name="PurchaseOrder",
    initial_state=PurchaseOrderStatus.PENDING,
    terminal_states=frozenset({
        PurchaseOrderStatus.FULFILLED,
        PurchaseOrderStatus.CANCELLED,
    }),
    transitions={
        PurchaseOrderStatus.PENDING: frozenset({
            PurchaseOrderStatus.APPROVED,
            PurchaseOrderStatus.FULFILLED,
            PurchaseOrderStatus.CANCELLED,
        }),
        PurchaseOrderStatus.APPROVED: frozenset({
            PurchaseOrderStatus.FULFILLED,
            PurchaseOrderStatus.CANCELLED,
        }),
        PurchaseOrderStatus.FULFILLED: frozenset(),
        PurchaseOrderStatus.CANCELLED: frozenset(),
    },
)


# ══════════════════════════════════════════════════════════════
# CREATION
# ══════════════════════════════════════════════════════════════

def place_order(
    *,
    order_id: str,
    code: str,
    requester_id: str,
    lines: Sequence[PurchaseOrderLine],
    requested_at: datetime,
    notes: str = "",
) -> PurchaseOrder:
    if not lines:
        raise InvalidQuantityError(
            "Purchase order must contain at least one item.",
            policy_name=POLICY_NAME,
        )
    for line in lines:
        if line.quantity <= 0:
            raise InvalidQuantityError(
                f"Order quantity for item '{line.item_id}' must be positive, "
                f"got {line.quantity}.",
                policy_name=POLICY_NAME,
            )
    return PurchaseOrder(
        id=order_id,
        code=code,
        status=PURCHASE_ORDER_WORKFLOW.initial_state,
        request_date=requested_at,
        requester_id=requester_id,
        items=tuple(lines),
        notes=notes,
    )


# ══════════════════════════════════════════════════════════════
# TRANSITIONS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TransitionResult:
    """
    Fields:
        order:         Order after the transition
        changed:       False for the accepted FULFILLED→FULFILLED no-op
        stock_credits: (item_id, quantity) per order line to credit
    """
    order: PurchaseOrder
    changed: bool
    stock_credits: Tuple[Tuple[str, Decimal], ...] = ()


def transition(
    order: PurchaseOrder,
    to_status: PurchaseOrderStatus,
    *,
    actor_id: str,
    at: datetime,
    reason: Optional[str] = None,
) -> TransitionResult:
    """Apply one status change. Raises InvalidTransitionError when disallowed."""
    if (
        to_status == PurchaseOrderStatus.FULFILLED
        and order.status == PurchaseOrderStatus.FULFILLED
    ):
        logger.info(f"Order {order.code} already FULFILLED; nothing to do")
        return TransitionResult(order=order, changed=False)

    if not PURCHASE_ORDER_WORKFLOW.is_valid_transition(order.status, to_status):
        raise InvalidTransitionError(
            order.status.value,
            to_status.value,
            subject=f"Purchase order {order.code or order.id}",
            policy_name=POLICY_NAME,
        )

    credits: Tuple[Tuple[str, Decimal], ...] = ()

    if to_status == PurchaseOrderStatus.APPROVED:
        updated = replace(
            order,
            status=to_status,
            approval_date=at,
            approved_by_id=actor_id,
        )
    elif to_status == PurchaseOrderStatus.FULFILLED:
        updated = replace(
            order,
            status=to_status,
            approval_date=order.approval_date or at,
            approved_by_id=(
                order.approved_by_id if order.approval_date else actor_id
            ),
            fulfilled_date=at,
            fulfilled_by_id=actor_id,
        )
        credits = tuple((line.item_id, line.quantity) for line in order.items)
    else:
        updated = replace(
            order,
            status=to_status,
            cancellation_date=at,
            cancelled_by_id=actor_id,
            cancellation_reason=reason,
        )

    logger.info(
        f"Order {order.code}: {order.status.value} → {to_status.value} "
        f"by {actor_id}"
    )
    return TransitionResult(order=updated, changed=True, stock_credits=credits)
