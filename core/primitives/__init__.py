"""
AgroSync Core Primitives — Farm Ledger Building Blocks
========================================================
Immutable (frozen dataclass) values shared by every engine:

    farm        — Farm aggregate, Collaborator
    machine     — Machine, hour-meter readings, maintenance counters
    logs        — FuelLog, MaintenanceLog, FuelPrice
    warehouse   — WarehouseItem, StockHistoryEntry
    purchasing  — PurchaseOrder and its lines
    values      — Decimal conversion at the document boundary

Pure Python, no Django dependency.
"""

from core.primitives.farm import Collaborator, Farm
from core.primitives.logs import (
    SERVICED_COMPONENTS,
    FuelLog,
    FuelPrice,
    MaintenanceLog,
    MaintenanceType,
    PartUsage,
)
from core.primitives.machine import (
    HourMeterReading,
    HourMeterSource,
    LastMaintenance,
    Machine,
    MaintenanceComponent,
    MaintenanceIntervals,
)
from core.primitives.purchasing import (
    PurchaseOrder,
    PurchaseOrderLine,
    PurchaseOrderStatus,
)
from core.primitives.warehouse import (
    StockHistoryEntry,
    StockReason,
    WarehouseItem,
)

__all__ = [
    "Collaborator",
    "Farm",
    "FuelLog",
    "FuelPrice",
    "HourMeterReading",
    "HourMeterSource",
    "LastMaintenance",
    "Machine",
    "MaintenanceComponent",
    "MaintenanceIntervals",
    "MaintenanceLog",
    "MaintenanceType",
    "PartUsage",
    "PurchaseOrder",
    "PurchaseOrderLine",
    "PurchaseOrderStatus",
    "SERVICED_COMPONENTS",
    "StockHistoryEntry",
    "StockReason",
    "WarehouseItem",
]
