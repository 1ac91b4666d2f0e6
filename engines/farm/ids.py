"""
AgroSync Farm Ledger — Identifier Generation
==============================================
Entity ids are "<kind>_<suffix>": machine_, collab_, fuel_, maint_,
item_, po_. The default suffix is a UUID4 hex; tests inject the
sequential generator for predictable ids.

Generators do not see the farm. The ledger service draws again while a
generated id is already taken in the target collection, so a sequential
generator over a loaded farm skips the ids it already holds.
"""

from __future__ import annotations

import uuid
from typing import Dict, Protocol

MACHINE = "machine"
COLLABORATOR = "collab"
FUEL_LOG = "fuel"
MAINTENANCE_LOG = "maint"
WAREHOUSE_ITEM = "item"
PURCHASE_ORDER = "po"


class IdGenerator(Protocol):
    def new_id(self, kind: str) -> str:
        ...  # pragma: no cover


class UuidIdGenerator:
    def new_id(self, kind: str) -> str:
        return f"{kind}_{uuid.uuid4().hex}"


class SequentialIdGenerator:
    """Deterministic ids: machine_1, machine_2, fuel_1 ..."""

    def __init__(self) -> None:
        self._counters: Dict[str, int] = {}

    def new_id(self, kind: str) -> str:
        self._counters[kind] = self._counters.get(kind, 0) + 1
        return f"{kind}_{self._counters[kind]}"
