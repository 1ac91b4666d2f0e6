"""
AgroSync Fleet Engine — Maintenance Due Counters
==================================================
Read-only view: for each component with a configured service interval,
how many hours ago it was serviced and how many hours remain.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from core.primitives.machine import Machine, MaintenanceComponent


@dataclass(frozen=True)
class MaintenanceDue:
    component: MaintenanceComponent
    interval: Decimal
    last_service_hour: Decimal
    hours_since_service: Decimal
    hours_remaining: Decimal

    @property
    def is_overdue(self) -> bool:
        return self.hours_remaining < 0

    def to_dict(self) -> dict:
        return {
            "component": self.component.value,
            "interval": str(self.interval),
            "last_service_hour": str(self.last_service_hour),
            "hours_since_service": str(self.hours_since_service),
            "hours_remaining": str(self.hours_remaining),
            "is_overdue": self.is_overdue,
        }


def maintenance_due(machine: Machine) -> Tuple[MaintenanceDue, ...]:
    """Due counters in component declaration order; untracked components skipped."""
    result = []
    for component in MaintenanceComponent:
        interval: Optional[Decimal] = machine.maintenance_intervals.interval_for(component)
        if interval is None:
            continue
        last = machine.last_maintenance.hour_for(component)
        since = machine.hour_meter - last
        result.append(MaintenanceDue(
            component=component,
            interval=interval,
            last_service_hour=last,
            hours_since_service=since,
            hours_remaining=interval - since,
        ))
    return tuple(result)


def overdue_components(machine: Machine) -> Tuple[MaintenanceComponent, ...]:
    return tuple(due.component for due in maintenance_due(machine) if due.is_overdue)
