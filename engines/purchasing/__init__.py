"""
AgroSync Purchasing Engine
============================
Purchase order numbering and lifecycle.
"""

from engines.purchasing.numbering import (
    format_order_code,
    next_order_code,
    parse_order_sequence,
)
from engines.purchasing.workflow import (
    PURCHASE_ORDER_WORKFLOW,
    TransitionResult,
    WorkflowDefinition,
    place_order,
    transition,
)

__all__ = [
    "PURCHASE_ORDER_WORKFLOW",
    "TransitionResult",
    "WorkflowDefinition",
    "format_order_code",
    "next_order_code",
    "parse_order_sequence",
    "place_order",
    "transition",
]
