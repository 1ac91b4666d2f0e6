"""
AgroSync Projections — Cost Reports
=====================================
Read-only cost views over a Farm snapshot.

Cost sources:
- Fuel:        FuelLog.total_value, attributed to the log's machine
- Maintenance: MaintenanceLog.total_cost, attributed to the log's machine
- Purchases:   FULFILLED orders by fulfilled_date, Σ quantity × current
               item unit value (missing items count 0); not attributed
               to any machine

Periods are closed whole-day windows [start 00:00, end 23:59:59.999999] UTC.
Without a machine filter, only logs of machines that still exist count.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from core.primitives.farm import Farm
from core.primitives.logs import MaintenanceLog
from core.primitives.purchasing import PurchaseOrder, PurchaseOrderStatus
from core.time.temporal import DateLike, TimeWindow

ZERO = Decimal(0)
HUNDRED = Decimal(100)


class CostType(Enum):
    FUEL = "Fuel"
    MAINTENANCE = "Maintenance"
    PURCHASES = "Purchases"


ALL_COST_TYPES = frozenset(CostType)


@dataclass(frozen=True)
class CostEntry:
    date: datetime
    cost: Decimal
    cost_type: CostType
    machine_id: Optional[str] = None


@dataclass(frozen=True)
class TrendPoint:
    date: date
    cumulative_cost: Decimal


@dataclass(frozen=True)
class PeriodCosts:
    window: TimeWindow
    total_cost: Decimal = ZERO
    fuel_cost: Decimal = ZERO
    maintenance_cost: Decimal = ZERO
    purchase_cost: Decimal = ZERO
    costs_by_machine: Dict[str, Decimal] = field(default_factory=dict)
    cost_trend: Tuple[TrendPoint, ...] = ()

    def day_trend(self) -> Tuple[Tuple[int, Decimal], ...]:
        """Cumulative cost keyed by 1-based day of the window."""
        return tuple(
            (self.window.day_index(datetime(p.date.year, p.date.month, p.date.day)),
             p.cumulative_cost)
            for p in self.cost_trend
        )

    def to_dict(self) -> dict:
        return {
            "start": self.window.start.isoformat(),
            "end": self.window.end.isoformat(),
            "total_cost": str(self.total_cost),
            "fuel_cost": str(self.fuel_cost),
            "maintenance_cost": str(self.maintenance_cost),
            "purchase_cost": str(self.purchase_cost),
            "costs_by_machine": {k: str(v) for k, v in self.costs_by_machine.items()},
            "cost_trend": [
                {"date": p.date.isoformat(), "cost": str(p.cumulative_cost)}
                for p in self.cost_trend
            ],
        }


# ══════════════════════════════════════════════════════════════
# VALUATION HELPERS
# ══════════════════════════════════════════════════════════════

def order_estimated_total(farm: Farm, order: PurchaseOrder) -> Decimal:
    """Σ line quantity × current unit value; unknown items are valued at 0."""
    total = ZERO
    for line in order.items:
        item = farm.warehouse_item(line.item_id)
        if item is not None:
            total += item.unit_value * line.quantity
    return total


@dataclass(frozen=True)
class PartCostLine:
    item_id: str
    item_name: Optional[str]
    quantity: Decimal
    unit_value: Decimal
    subtotal: Decimal


@dataclass(frozen=True)
class MaintenanceCostBreakdown:
    total_cost: Decimal
    parts_cost: Decimal
    labor_cost: Decimal
    lines: Tuple[PartCostLine, ...] = ()


def maintenance_cost_breakdown(farm: Farm, log: MaintenanceLog) -> MaintenanceCostBreakdown:
    """Split a service's total into parts (at current unit value) and labor/other."""
    lines = []
    for part in log.parts_used:
        item = farm.warehouse_item(part.item_id)
        unit_value = item.unit_value if item is not None else ZERO
        lines.append(PartCostLine(
            item_id=part.item_id,
            item_name=item.name if item is not None else None,
            quantity=part.quantity,
            unit_value=unit_value,
            subtotal=unit_value * part.quantity,
        ))
    parts_cost = sum((line.subtotal for line in lines), ZERO)
    return MaintenanceCostBreakdown(
        total_cost=log.total_cost,
        parts_cost=parts_cost,
        labor_cost=log.total_cost - parts_cost,
        lines=tuple(lines),
    )


# ══════════════════════════════════════════════════════════════
# PERIOD COSTS
# ══════════════════════════════════════════════════════════════

def cost_entries(
    farm: Farm,
    window: TimeWindow,
    cost_types: Iterable[CostType] = ALL_COST_TYPES,
    machine_ids: Optional[Iterable[str]] = None,
) -> List[CostEntry]:
    """Every cost event inside the window, oldest first."""
    types = frozenset(cost_types)
    machines = (
        frozenset(machine_ids) if machine_ids
        else frozenset(m.id for m in farm.machines)
    )
    entries: List[CostEntry] = []

    if CostType.FUEL in types:
        entries.extend(
            CostEntry(log.date, log.total_value, CostType.FUEL, log.machine_id)
            for log in farm.fuel_logs
            if window.contains(log.date) and log.machine_id in machines
        )
    if CostType.MAINTENANCE in types:
        entries.extend(
            CostEntry(log.date, log.total_cost, CostType.MAINTENANCE, log.machine_id)
            for log in farm.maintenance_logs
            if window.contains(log.date) and log.machine_id in machines
        )
    if CostType.PURCHASES in types:
        entries.extend(
            CostEntry(order.fulfilled_date, order_estimated_total(farm, order),
                      CostType.PURCHASES)
            for order in farm.purchase_orders
            if order.status == PurchaseOrderStatus.FULFILLED
            and order.fulfilled_date is not None
            and window.contains(order.fulfilled_date)
        )

    entries.sort(key=lambda entry: entry.date)
    return entries


def period_costs(
    farm: Farm,
    start: DateLike,
    end: DateLike,
    cost_types: Iterable[CostType] = ALL_COST_TYPES,
    machine_ids: Optional[Iterable[str]] = None,
) -> PeriodCosts:
    window = TimeWindow.for_days(start, end)
    entries = cost_entries(farm, window, cost_types, machine_ids)

    totals = {cost_type: ZERO for cost_type in CostType}
    by_machine: Dict[str, Decimal] = {}
    trend = []
    running = ZERO

    for entry in entries:
        totals[entry.cost_type] += entry.cost
        if entry.machine_id is not None:
            by_machine[entry.machine_id] = by_machine.get(entry.machine_id, ZERO) + entry.cost
        running += entry.cost
        trend.append(TrendPoint(date=entry.date.date(), cumulative_cost=running))

    return PeriodCosts(
        window=window,
        total_cost=running,
        fuel_cost=totals[CostType.FUEL],
        maintenance_cost=totals[CostType.MAINTENANCE],
        purchase_cost=totals[CostType.PURCHASES],
        costs_by_machine=by_machine,
        cost_trend=tuple(trend),
    )


# ══════════════════════════════════════════════════════════════
# COMPARISON
# ══════════════════════════════════════════════════════════════

def percentage_change(old: Decimal, new: Decimal) -> Optional[Decimal]:
    """(new - old) / old × 100. 0 → 0 is 0; 0 → x is undefined (None)."""
    if old == 0 and new == 0:
        return ZERO
    if old == 0:
        return None
    return (new - old) / old * HUNDRED


@dataclass(frozen=True)
class PeriodComparison:
    """Period A measured against reference period B."""
    current: PeriodCosts
    reference: PeriodCosts
    total_change: Optional[Decimal]
    fuel_change: Optional[Decimal]
    maintenance_change: Optional[Decimal]
    purchase_change: Optional[Decimal]

    def machine_costs(self, farm: Farm, limit: int = 10) -> Tuple[Tuple[str, Decimal, Decimal], ...]:
        """
        (machine name, cost A, cost B) for every machine with cost in
        either period, largest combined cost first. Deleted machines
        are named "Unknown".
        """
        machine_ids = list(dict.fromkeys(
            list(self.current.costs_by_machine) + list(self.reference.costs_by_machine)
        ))
        rows = []
        for machine_id in machine_ids:
            machine = farm.machine(machine_id)
            rows.append((
                machine.name if machine is not None else "Unknown",
                self.current.costs_by_machine.get(machine_id, ZERO),
                self.reference.costs_by_machine.get(machine_id, ZERO),
            ))
        rows.sort(key=lambda row: row[1] + row[2], reverse=True)
        return tuple(rows[:limit])

    def combined_trend(self) -> Tuple[Tuple[int, Decimal, Decimal], ...]:
        """Day-by-day cumulative cost of both periods, carried forward on quiet days."""
        trend_a = dict(self.current.day_trend())
        trend_b = dict(self.reference.day_trend())
        last_day = max(list(trend_a) + list(trend_b), default=0)
        rows = []
        cost_a = cost_b = ZERO
        for day in range(1, last_day + 1):
            cost_a = trend_a.get(day, cost_a)
            cost_b = trend_b.get(day, cost_b)
            rows.append((day, cost_a, cost_b))
        return tuple(rows)


def compare_periods(current: PeriodCosts, reference: PeriodCosts) -> PeriodComparison:
    return PeriodComparison(
        current=current,
        reference=reference,
        total_change=percentage_change(reference.total_cost, current.total_cost),
        fuel_change=percentage_change(reference.fuel_cost, current.fuel_cost),
        maintenance_change=percentage_change(
            reference.maintenance_cost, current.maintenance_cost,
        ),
        purchase_change=percentage_change(reference.purchase_cost, current.purchase_cost),
    )


__all__ = [
    "ALL_COST_TYPES",
    "CostEntry",
    "CostType",
    "MaintenanceCostBreakdown",
    "PartCostLine",
    "PeriodComparison",
    "PeriodCosts",
    "TrendPoint",
    "compare_periods",
    "cost_entries",
    "maintenance_cost_breakdown",
    "order_estimated_total",
    "percentage_change",
    "period_costs",
]
