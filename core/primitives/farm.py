"""
AgroSync Farm Aggregate — One Immutable Snapshot
==================================================
The Farm holds every collection of the ledger. It is replaced as a
whole on each accepted command; nothing mutates it in place.

Lookups by id return None for unknown ids. Consumers treat a missing
machine, collaborator or item as "unknown" rather than failing.

Serialization uses the camelCase keys of the stored farm document.
A partial document merges over the empty farm: missing collections
load as empty.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, TypeVar

from core.primitives.logs import FuelLog, FuelPrice, MaintenanceLog
from core.primitives.machine import Machine
from core.primitives.purchasing import PurchaseOrder
from core.primitives.warehouse import WarehouseItem

T = TypeVar("T")


def _find(entities: Iterable[T], entity_id: str) -> Optional[T]:
    for entity in entities:
        if entity.id == entity_id:
            return entity
    return None


# ══════════════════════════════════════════════════════════════
# COLLABORATOR
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Collaborator:
    """A farm worker who records logs or handles purchase orders."""
    id: str
    name: str
    role: Optional[str] = None

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("id must be a non-empty string.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string.")

    def to_dict(self) -> dict:
        data = {"id": self.id, "name": self.name}
        if self.role is not None:
            data["role"] = self.role
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Collaborator:
        return cls(id=data["id"], name=data["name"], role=data.get("role"))


# ══════════════════════════════════════════════════════════════
# FARM
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Farm:
    name: Optional[str] = None
    machines: Tuple[Machine, ...] = ()
    collaborators: Tuple[Collaborator, ...] = ()
    fuel_logs: Tuple[FuelLog, ...] = ()
    maintenance_logs: Tuple[MaintenanceLog, ...] = ()
    fuel_prices: Tuple[FuelPrice, ...] = ()
    warehouse_items: Tuple[WarehouseItem, ...] = ()
    purchase_orders: Tuple[PurchaseOrder, ...] = ()

    def __post_init__(self):
        for name in (
            "machines", "collaborators", "fuel_logs", "maintenance_logs",
            "fuel_prices", "warehouse_items", "purchase_orders",
        ):
            if not isinstance(getattr(self, name), tuple):
                raise TypeError(f"{name} must be a tuple.")

    @classmethod
    def empty(cls) -> Farm:
        return cls()

    # ── Lookups ───────────────────────────────────────────────

    def machine(self, machine_id: str) -> Optional[Machine]:
        return _find(self.machines, machine_id)

    def collaborator(self, collaborator_id: str) -> Optional[Collaborator]:
        return _find(self.collaborators, collaborator_id)

    def warehouse_item(self, item_id: str) -> Optional[WarehouseItem]:
        return _find(self.warehouse_items, item_id)

    def fuel_log(self, log_id: str) -> Optional[FuelLog]:
        return _find(self.fuel_logs, log_id)

    def maintenance_log(self, log_id: str) -> Optional[MaintenanceLog]:
        return _find(self.maintenance_logs, log_id)

    def purchase_order(self, order_id: str) -> Optional[PurchaseOrder]:
        return _find(self.purchase_orders, order_id)

    def fuel_logs_for(self, machine_id: str) -> Tuple[FuelLog, ...]:
        return tuple(log for log in self.fuel_logs if log.machine_id == machine_id)

    def maintenance_logs_for(self, machine_id: str) -> Tuple[MaintenanceLog, ...]:
        return tuple(log for log in self.maintenance_logs if log.machine_id == machine_id)

    # ── Serialization ─────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "machines": [m.to_dict() for m in self.machines],
            "collaborators": [c.to_dict() for c in self.collaborators],
            "fuelLogs": [log.to_dict() for log in self.fuel_logs],
            "maintenanceLogs": [log.to_dict() for log in self.maintenance_logs],
            "fuelPrices": [p.to_dict() for p in self.fuel_prices],
            "warehouseItems": [i.to_dict() for i in self.warehouse_items],
            "purchaseOrders": [o.to_dict() for o in self.purchase_orders],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Farm:
        def rows(key):
            return data.get(key) or ()

        return cls(
            name=data.get("name"),
            machines=tuple(Machine.from_dict(r) for r in rows("machines")),
            collaborators=tuple(
                Collaborator.from_dict(r) for r in rows("collaborators")
            ),
            fuel_logs=tuple(FuelLog.from_dict(r) for r in rows("fuelLogs")),
            maintenance_logs=tuple(
                MaintenanceLog.from_dict(r) for r in rows("maintenanceLogs")
            ),
            fuel_prices=tuple(FuelPrice.from_dict(r) for r in rows("fuelPrices")),
            warehouse_items=tuple(
                WarehouseItem.from_dict(r) for r in rows("warehouseItems")
            ),
            purchase_orders=tuple(
                PurchaseOrder.from_dict(r) for r in rows("purchaseOrders")
            ),
        )
