"""
AgroSync Event Log Primitives — Fuel and Maintenance Logs
===========================================================
Fuel refills and maintenance services are the events the hour-meter
reconciler folds into each machine's summary. Logs are permanent:
they are edited, never deleted.

A log may reference a machine, a collaborator or a warehouse item that
no longer exists. Such dangling references are tolerated here.

Log dates are held as aware UTC datetimes; a naive date is read as UTC.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from core.primitives.machine import MaintenanceComponent
from core.primitives.values import ZERO, to_decimal, to_number
from core.time.temporal import as_utc, format_datetime, parse_datetime


# ══════════════════════════════════════════════════════════════
# MAINTENANCE TYPE
# ══════════════════════════════════════════════════════════════

class MaintenanceType(Enum):
    OIL_CHANGE = "OIL_CHANGE"
    FILTER_CHANGE = "FILTER_CHANGE"
    OIL_AND_FILTER = "OIL_AND_FILTER"
    PREVENTIVE = "PREVENTIVE"
    CORRECTIVE = "CORRECTIVE"

    @property
    def serviced_components(self) -> FrozenSet[MaintenanceComponent]:
        return SERVICED_COMPONENTS[self]


SERVICED_COMPONENTS: Dict[MaintenanceType, FrozenSet[MaintenanceComponent]] = {
    MaintenanceType.OIL_CHANGE: frozenset({
        MaintenanceComponent.ENGINE_OIL,
    }),
    MaintenanceType.FILTER_CHANGE: frozenset({
        MaintenanceComponent.FUEL_FILTER,
        MaintenanceComponent.AIR_FILTER,
    }),
    MaintenanceType.OIL_AND_FILTER: frozenset({
        MaintenanceComponent.ENGINE_OIL,
        MaintenanceComponent.FUEL_FILTER,
        MaintenanceComponent.AIR_FILTER,
    }),
    MaintenanceType.PREVENTIVE: frozenset(MaintenanceComponent),
    MaintenanceType.CORRECTIVE: frozenset(),
}


# ══════════════════════════════════════════════════════════════
# PART USAGE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PartUsage:
    """Quantity of one warehouse item consumed by a service."""
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
    def from_dict(cls, data: dict) -> PartUsage:
        return cls(item_id=data["itemId"], quantity=to_decimal(data["quantity"]))


# ══════════════════════════════════════════════════════════════
# FUEL LOG
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class FuelLog:
    """
    One refill. `odometer` is the machine hour-meter read at the pump
    and becomes a Fuel reading in the machine's history.
    """
    id: str
    machine_id: str
    collaborator_id: str
    date: datetime
    odometer: Decimal
    liters: Decimal = ZERO
    price_per_liter: Decimal = ZERO
    total_value: Decimal = ZERO
    fuel_type: str = ""
    notes: str = ""

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("id must be a non-empty string.")
        if not self.machine_id or not isinstance(self.machine_id, str):
            raise ValueError("machine_id must be a non-empty string.")
        if not isinstance(self.date, datetime):
            raise TypeError("date must be datetime.")
        object.__setattr__(self, "date", as_utc(self.date))
        for name in ("odometer", "liters", "price_per_liter", "total_value"):
            if not isinstance(getattr(self, name), Decimal):
                raise TypeError(f"{name} must be Decimal.")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "machineId": self.machine_id,
            "collaboratorId": self.collaborator_id,
            "date": format_datetime(self.date),
            "odometer": to_number(self.odometer),
            "liters": to_number(self.liters),
            "pricePerLiter": to_number(self.price_per_liter),
            "totalValue": to_number(self.total_value),
            "fuelType": self.fuel_type,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FuelLog:
        return cls(
            id=data["id"],
            machine_id=data["machineId"],
            collaborator_id=data.get("collaboratorId") or "",
            date=parse_datetime(data["date"]),
            odometer=to_decimal(data["odometer"]),
            liters=to_decimal(data.get("liters", 0)),
            price_per_liter=to_decimal(data.get("pricePerLiter", 0)),
            total_value=to_decimal(data.get("totalValue", 0)),
            fuel_type=data.get("fuelType") or "",
            notes=data.get("notes") or "",
        )


# ══════════════════════════════════════════════════════════════
# MAINTENANCE LOG
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MaintenanceLog:
    """
    One service performed on a machine. `hour_meter` becomes a
    Maintenance reading; `type` decides which counters it raises;
    `parts_used` drives warehouse exits.
    """
    id: str
    machine_id: str
    collaborator_id: str
    date: datetime
    type: MaintenanceType
    hour_meter: Decimal
    total_cost: Decimal = ZERO
    parts_used: Tuple[PartUsage, ...] = ()
    notes: str = ""

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("id must be a non-empty string.")
        if not self.machine_id or not isinstance(self.machine_id, str):
            raise ValueError("machine_id must be a non-empty string.")
        if not isinstance(self.date, datetime):
            raise TypeError("date must be datetime.")
        object.__setattr__(self, "date", as_utc(self.date))
        if not isinstance(self.type, MaintenanceType):
            raise ValueError("type must be MaintenanceType enum.")
        if not isinstance(self.hour_meter, Decimal):
            raise TypeError("hour_meter must be Decimal.")
        if not isinstance(self.total_cost, Decimal):
            raise TypeError("total_cost must be Decimal.")
        if not isinstance(self.parts_used, tuple):
            raise TypeError("parts_used must be a tuple.")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "machineId": self.machine_id,
            "collaboratorId": self.collaborator_id,
            "date": format_datetime(self.date),
            "type": self.type.value,
            "hourMeter": to_number(self.hour_meter),
            "totalCost": to_number(self.total_cost),
            "partsUsed": [p.to_dict() for p in self.parts_used],
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> MaintenanceLog:
        return cls(
            id=data["id"],
            machine_id=data["machineId"],
            collaborator_id=data.get("collaboratorId") or "",
            date=parse_datetime(data["date"]),
            type=MaintenanceType(data["type"]),
            hour_meter=to_decimal(data["hourMeter"]),
            total_cost=to_decimal(data.get("totalCost", 0)),
            parts_used=tuple(
                PartUsage.from_dict(p) for p in data.get("partsUsed") or ()
            ),
            notes=data.get("notes") or "",
        )


# ══════════════════════════════════════════════════════════════
# FUEL PRICE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class FuelPrice:
    fuel_type: str
    price_per_liter: Decimal
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.fuel_type or not isinstance(self.fuel_type, str):
            raise ValueError("fuel_type must be a non-empty string.")
        if not isinstance(self.price_per_liter, Decimal):
            raise TypeError("price_per_liter must be Decimal.")
        if self.price_per_liter < 0:
            raise ValueError("price_per_liter cannot be negative.")

    def to_dict(self) -> dict:
        data = {
            "fuelType": self.fuel_type,
            "pricePerLiter": to_number(self.price_per_liter),
        }
        if self.updated_at is not None:
            data["updatedAt"] = format_datetime(self.updated_at)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> FuelPrice:
        updated_at = data.get("updatedAt")
        return cls(
            fuel_type=data["fuelType"],
            price_per_liter=to_decimal(data["pricePerLiter"]),
            updated_at=parse_datetime(updated_at) if updated_at else None,
        )
