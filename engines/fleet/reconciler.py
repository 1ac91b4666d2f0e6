"""
AgroSync Fleet Engine — Hour-Meter Reconciler
===============================================
Derives a machine's current hour-meter, its reading history and its
last-maintenance counters from the fuel and maintenance logs that
reference it.

Ordering rule (shared by every path):
    readings sorted by date DESC, then value DESC.
    The head of that order is the current hour-meter (most recent wins,
    not highest wins). Remaining ties are broken by source and source id
    so the order is total.

Two paths, one result:
    reconcile()      — full rebuild from all logs (edit path)
    apply_reading()  — insert one new reading into an existing summary
                       (create path); equals reconcile() over the same logs

This module is pure: no I/O, no clock, no persistence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from core.primitives.logs import FuelLog, MaintenanceLog, MaintenanceType
from core.primitives.machine import (
    HourMeterReading,
    HourMeterSource,
    LastMaintenance,
    Machine,
)

logger = logging.getLogger("agrosync.fleet")


# ══════════════════════════════════════════════════════════════
# SUMMARY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MachineSummary:
    """The derived hour-meter fields of one machine."""
    hour_meter: Decimal
    hour_meter_history: Tuple[HourMeterReading, ...]
    last_maintenance: LastMaintenance

    @classmethod
    def of(cls, machine: Machine) -> MachineSummary:
        """Current summary stored on a machine, history in canonical order."""
        return cls(
            hour_meter=machine.hour_meter,
            hour_meter_history=ordered_readings(machine.hour_meter_history),
            last_maintenance=machine.last_maintenance,
        )

    def apply_to(self, machine: Machine) -> Machine:
        return replace(
            machine,
            hour_meter=self.hour_meter,
            hour_meter_history=self.hour_meter_history,
            last_maintenance=self.last_maintenance,
        )


# ══════════════════════════════════════════════════════════════
# ORDERING
# ══════════════════════════════════════════════════════════════

def reading_order_key(reading: HourMeterReading) -> tuple:
    """Sort key; larger key = more recent reading."""
    return (reading.date, reading.value, reading.source.value, reading.source_id)


def ordered_readings(readings: Iterable[HourMeterReading]) -> Tuple[HourMeterReading, ...]:
    return tuple(sorted(readings, key=reading_order_key, reverse=True))


def reading_from_fuel_log(log: FuelLog) -> HourMeterReading:
    return HourMeterReading(
        date=log.date,
        value=log.odometer,
        source=HourMeterSource.FUEL,
        source_id=log.id,
        collaborator_id=log.collaborator_id or None,
    )


def reading_from_maintenance_log(log: MaintenanceLog) -> HourMeterReading:
    return HourMeterReading(
        date=log.date,
        value=log.hour_meter,
        source=HourMeterSource.MAINTENANCE,
        source_id=log.id,
        collaborator_id=log.collaborator_id or None,
    )


# ══════════════════════════════════════════════════════════════
# FULL RECONCILE
# ══════════════════════════════════════════════════════════════

def reconcile(
    machine: Machine,
    fuel_logs: Iterable[FuelLog],
    maintenance_logs: Iterable[MaintenanceLog],
) -> MachineSummary:
    """
    Rebuild a machine's summary from every log that references it.

    Logs of other machines are ignored, so callers may pass the whole
    farm's collections. Counters start from zero on every call.
    """
    fuel = [log for log in fuel_logs if log.machine_id == machine.id]
    services = [log for log in maintenance_logs if log.machine_id == machine.id]

    history = ordered_readings(
        [reading_from_fuel_log(log) for log in fuel]
        + [reading_from_maintenance_log(log) for log in services]
    )

    counters = LastMaintenance()
    for log in services:
        counters = counters.raised(log.type.serviced_components, log.hour_meter)

    hour_meter = history[0].value if history else machine.initial_hour_meter

    logger.debug(
        f"Reconciled machine {machine.id}: hour_meter={hour_meter} "
        f"from {len(fuel)} fuel / {len(services)} maintenance logs"
    )

    return MachineSummary(
        hour_meter=hour_meter,
        hour_meter_history=history,
        last_maintenance=counters,
    )


# ══════════════════════════════════════════════════════════════
# INSERT FAST PATH
# ══════════════════════════════════════════════════════════════

def apply_reading(
    summary: MachineSummary,
    reading: HourMeterReading,
    maintenance_type: Optional[MaintenanceType] = None,
) -> MachineSummary:
    """
    Insert one reading into an ordered summary.

    The reading takes its place in the canonical order, so a backfilled
    (older) reading lands in the history without moving the current
    hour-meter. For maintenance readings the serviced counters are raised.
    """
    if maintenance_type is not None and reading.source != HourMeterSource.MAINTENANCE:
        raise ValueError("maintenance_type applies to Maintenance readings only.")

    history = list(summary.hour_meter_history)
    key = reading_order_key(reading)
    index = next(
        (i for i, existing in enumerate(history) if reading_order_key(existing) < key),
        len(history),
    )
    history.insert(index, reading)

    counters = summary.last_maintenance
    if maintenance_type is not None:
        counters = counters.raised(maintenance_type.serviced_components, reading.value)

    if index > 0:
        logger.debug(
            f"Backfilled reading {reading.source_id} ({reading.value}) "
            f"kept out of head position"
        )

    return MachineSummary(
        hour_meter=history[0].value,
        hour_meter_history=tuple(history),
        last_maintenance=counters,
    )
