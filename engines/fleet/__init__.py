"""
AgroSync Fleet Engine
=======================
Hour-meter reconciliation and maintenance due counters.
"""

from engines.fleet.maintenance import MaintenanceDue, maintenance_due, overdue_components
from engines.fleet.reconciler import (
    MachineSummary,
    apply_reading,
    ordered_readings,
    reading_from_fuel_log,
    reading_from_maintenance_log,
    reconcile,
)

__all__ = [
    "MachineSummary",
    "MaintenanceDue",
    "apply_reading",
    "maintenance_due",
    "ordered_readings",
    "overdue_components",
    "reading_from_fuel_log",
    "reading_from_maintenance_log",
    "reconcile",
]
