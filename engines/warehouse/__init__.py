"""
AgroSync Warehouse Engine
===========================
Append-only stock ledger for warehouse items.
"""

from engines.warehouse.ledger import (
    PostingResult,
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

__all__ = [
    "PostingResult",
    "adjust_to",
    "consumption_movements",
    "edit_movements",
    "open_item",
    "post_movement",
    "post_movements",
    "receive_invoice",
    "validate_parts",
    "verify_history",
]
