"""
AgroSync Machine Primitive — Hour-Meter State of a Machine
============================================================
A Machine carries descriptive fields and three derived summaries:

    hour_meter          — current reading (head of the ordered history)
    hour_meter_history  — every fuel / maintenance reading, newest first
    last_maintenance    — hour-meter at which each component was last serviced

Derived summaries are written only by the hour-meter reconciler
(engines.fleet). Nothing else may set them.

This file contains NO reconciliation logic.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Tuple

from core.primitives.values import (
    ZERO,
    to_decimal,
    to_number,
    to_optional_decimal,
    to_optional_number,
)
from core.time.temporal import format_datetime, parse_datetime


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class HourMeterSource(Enum):
    """Which kind of log produced a reading."""
    FUEL = "Fuel"
    MAINTENANCE = "Maintenance"


# Source labels written by earlier versions of the stored document.
_LEGACY_SOURCES = {
    "Abastecimento": HourMeterSource.FUEL,
    "Manutenção": HourMeterSource.MAINTENANCE,
}


def parse_source(value: str) -> HourMeterSource:
    if value in _LEGACY_SOURCES:
        return _LEGACY_SOURCES[value]
    return HourMeterSource(value)


class MaintenanceComponent(Enum):
    """Serviceable components tracked per machine. Value = document key."""
    ENGINE_OIL = "engineOilHour"
    TRANSMISSION_OIL = "transmissionOilHour"
    FUEL_FILTER = "fuelFilterHour"
    AIR_FILTER = "airFilterHour"


_COMPONENT_FIELDS = {
    MaintenanceComponent.ENGINE_OIL: "engine_oil_hour",
    MaintenanceComponent.TRANSMISSION_OIL: "transmission_oil_hour",
    MaintenanceComponent.FUEL_FILTER: "fuel_filter_hour",
    MaintenanceComponent.AIR_FILTER: "air_filter_hour",
}


# ══════════════════════════════════════════════════════════════
# HOUR-METER READING
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class HourMeterReading:
    """
    One hour-meter data point taken during a fuel refill or a service.

    Fields:
        date:            When the reading was taken
        value:           Hour-meter value (fuel odometer or service hour-meter)
        source:          Fuel | Maintenance
        source_id:       Id of the log that produced the reading
        collaborator_id: Who recorded it (may dangle)
    """
    date: datetime
    value: Decimal
    source: HourMeterSource
    source_id: str
    collaborator_id: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.date, datetime):
            raise TypeError("date must be datetime.")
        if not isinstance(self.value, Decimal):
            raise TypeError("value must be Decimal.")
        if not isinstance(self.source, HourMeterSource):
            raise ValueError("source must be HourMeterSource enum.")
        if not self.source_id or not isinstance(self.source_id, str):
            raise ValueError("source_id must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "date": format_datetime(self.date),
            "value": to_number(self.value),
            "collaboratorId": self.collaborator_id,
            "source": self.source.value,
            "sourceId": self.source_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> HourMeterReading:
        return cls(
            date=parse_datetime(data["date"]),
            value=to_decimal(data["value"]),
            source=parse_source(data["source"]),
            source_id=data["sourceId"],
            collaborator_id=data.get("collaboratorId"),
        )


# ══════════════════════════════════════════════════════════════
# LAST MAINTENANCE COUNTERS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LastMaintenance:
    """Hour-meter value at which each component was last serviced."""
    engine_oil_hour: Decimal = ZERO
    transmission_oil_hour: Decimal = ZERO
    fuel_filter_hour: Decimal = ZERO
    air_filter_hour: Decimal = ZERO

    def hour_for(self, component: MaintenanceComponent) -> Decimal:
        return getattr(self, _COMPONENT_FIELDS[component])

    def raised(
        self,
        components: Iterable[MaintenanceComponent],
        hour_meter: Decimal,
    ) -> LastMaintenance:
        """Return counters with each component raised to max(current, hour_meter)."""
        changes = {}
        for component in components:
            field_name = _COMPONENT_FIELDS[component]
            if hour_meter > getattr(self, field_name):
                changes[field_name] = hour_meter
        return replace(self, **changes) if changes else self

    def to_dict(self) -> dict:
        return {
            component.value: to_number(self.hour_for(component))
            for component in MaintenanceComponent
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> LastMaintenance:
        data = data or {}
        return cls(**{
            _COMPONENT_FIELDS[component]: to_decimal(data.get(component.value, 0))
            for component in MaintenanceComponent
        })


# ══════════════════════════════════════════════════════════════
# SERVICE INTERVALS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MaintenanceIntervals:
    """
    Hours between services per component. None = not tracked.
    Used to compute due counters; never written by reconcilers.
    """
    engine_oil_hour: Optional[Decimal] = None
    transmission_oil_hour: Optional[Decimal] = None
    fuel_filter_hour: Optional[Decimal] = None
    air_filter_hour: Optional[Decimal] = None

    def __post_init__(self):
        for component in MaintenanceComponent:
            interval = self.interval_for(component)
            if interval is not None and interval <= 0:
                raise ValueError(
                    f"Interval for {component.name} must be positive, "
                    f"got {interval}."
                )

    def interval_for(self, component: MaintenanceComponent) -> Optional[Decimal]:
        return getattr(self, _COMPONENT_FIELDS[component])

    def to_dict(self) -> dict:
        return {
            component.value: to_optional_number(self.interval_for(component))
            for component in MaintenanceComponent
            if self.interval_for(component) is not None
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> MaintenanceIntervals:
        data = data or {}
        return cls(**{
            _COMPONENT_FIELDS[component]: to_optional_decimal(data.get(component.value))
            for component in MaintenanceComponent
        })


# ══════════════════════════════════════════════════════════════
# MACHINE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Machine:
    """
    A tractor, harvester, sprayer or any hour-metered machine.

    initial_hour_meter is the reading captured at registration;
    it is the current value while the machine has no readings.
    """
    id: str
    name: str
    model: str = ""
    brand: str = ""
    year: Optional[int] = None
    initial_hour_meter: Decimal = ZERO
    hour_meter: Decimal = ZERO
    hour_meter_history: Tuple[HourMeterReading, ...] = ()
    last_maintenance: LastMaintenance = LastMaintenance()
    maintenance_intervals: MaintenanceIntervals = MaintenanceIntervals()

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("id must be a non-empty string.")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string.")
        if not isinstance(self.hour_meter_history, tuple):
            raise TypeError("hour_meter_history must be a tuple.")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "model": self.model,
            "brand": self.brand,
            "year": self.year,
            "initialHourMeter": to_number(self.initial_hour_meter),
            "hourMeter": to_number(self.hour_meter),
            "hourMeterHistory": [r.to_dict() for r in self.hour_meter_history],
            "lastMaintenance": self.last_maintenance.to_dict(),
            "maintenanceIntervals": self.maintenance_intervals.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Machine:
        history = tuple(
            HourMeterReading.from_dict(r)
            for r in data.get("hourMeterHistory") or ()
        )
        hour_meter = to_decimal(data.get("hourMeter", 0))
        # Documents without initialHourMeter: a machine with no readings
        # keeps its stored hour-meter as the registration value.
        default_initial = hour_meter if not history else 0
        return cls(
            id=data["id"],
            name=data["name"],
            model=data.get("model") or "",
            brand=data.get("brand") or "",
            year=data.get("year"),
            initial_hour_meter=to_decimal(
                data.get("initialHourMeter", default_initial)
            ),
            hour_meter=hour_meter,
            hour_meter_history=history,
            last_maintenance=LastMaintenance.from_dict(data.get("lastMaintenance")),
            maintenance_intervals=MaintenanceIntervals.from_dict(
                data.get("maintenanceIntervals")
            ),
        )
