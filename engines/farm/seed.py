"""
AgroSync Farm Ledger — Seed Data
==================================
A first authenticated session with nothing stored starts from a demo
farm so every screen has something to show.

The demo data is built from logs, then run through the same reconcilers
the service uses, so its derived fields satisfy every ledger invariant.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Protocol

from core.primitives.farm import Collaborator, Farm
from core.primitives.logs import (
    FuelLog,
    FuelPrice,
    MaintenanceLog,
    MaintenanceType,
    PartUsage,
)
from core.primitives.machine import Machine, MaintenanceIntervals
from core.primitives.purchasing import (
    PurchaseOrder,
    PurchaseOrderLine,
    PurchaseOrderStatus,
)
from core.primitives.warehouse import StockReason
from engines.fleet.reconciler import reconcile
from engines.warehouse.ledger import consumption_movements, open_item, post_movements


class SeedDataProvider(Protocol):
    def load(self) -> Farm:
        ...  # pragma: no cover


def _at(day: int, month: int = 3, hour: int = 8) -> datetime:
    return datetime(2024, month, day, hour, 0, tzinfo=timezone.utc)


class DemoSeedProvider:
    """Two tractors, a harvester, a small warehouse and a pending order."""

    def load(self) -> Farm:
        intervals = MaintenanceIntervals(
            engine_oil_hour=Decimal(250),
            transmission_oil_hour=Decimal(1000),
            fuel_filter_hour=Decimal(500),
            air_filter_hour=Decimal(500),
        )
        machines = (
            Machine(
                id="machine_demo_1", name="Trator 01", model="7200J",
                brand="John Deere", year=2019,
                initial_hour_meter=Decimal(4800), hour_meter=Decimal(4800),
                maintenance_intervals=intervals,
            ),
            Machine(
                id="machine_demo_2", name="Trator 02", model="T7.245",
                brand="New Holland", year=2021,
                initial_hour_meter=Decimal(2100), hour_meter=Decimal(2100),
                maintenance_intervals=intervals,
            ),
            Machine(
                id="machine_demo_3", name="Colheitadeira", model="S700",
                brand="John Deere", year=2020,
                initial_hour_meter=Decimal(1500), hour_meter=Decimal(1500),
            ),
        )
        collaborators = (
            Collaborator(id="collab_demo_1", name="Carlos Silva", role="Operator"),
            Collaborator(id="collab_demo_2", name="Ana Souza", role="Mechanic"),
            Collaborator(id="collab_demo_3", name="João Lima", role="Manager"),
        )

        fuel_logs = (
            FuelLog(
                id="fuel_demo_1", machine_id="machine_demo_1",
                collaborator_id="collab_demo_1", date=_at(4),
                odometer=Decimal(4852), liters=Decimal(180),
                price_per_liter=Decimal("5.89"), total_value=Decimal("1060.20"),
                fuel_type="Diesel S10",
            ),
            FuelLog(
                id="fuel_demo_2", machine_id="machine_demo_2",
                collaborator_id="collab_demo_1", date=_at(6),
                odometer=Decimal(2144), liters=Decimal(150),
                price_per_liter=Decimal("5.89"), total_value=Decimal("883.50"),
                fuel_type="Diesel S10",
            ),
            FuelLog(
                id="fuel_demo_3", machine_id="machine_demo_1",
                collaborator_id="collab_demo_1", date=_at(12),
                odometer=Decimal(4910), liters=Decimal(175),
                price_per_liter=Decimal("5.95"), total_value=Decimal("1041.25"),
                fuel_type="Diesel S10",
            ),
        )

        items = (
            open_item(
                item_id="item_demo_1", code="FLT-001", name="Filtro de óleo",
                unit_value=Decimal("89.90"), initial_quantity=Decimal(12),
                created_at=_at(1, hour=7),
            ),
            open_item(
                item_id="item_demo_2", code="OLE-015", name="Óleo 15W40 (litro)",
                unit_value=Decimal("32.50"), initial_quantity=Decimal(80),
                created_at=_at(1, hour=7),
            ),
            open_item(
                item_id="item_demo_3", code="FLT-010", name="Filtro de ar",
                unit_value=Decimal("145.00"), initial_quantity=Decimal(4),
                created_at=_at(1, hour=7),
            ),
        )

        maintenance_logs = (
            MaintenanceLog(
                id="maint_demo_1", machine_id="machine_demo_1",
                collaborator_id="collab_demo_2", date=_at(8),
                type=MaintenanceType.OIL_CHANGE, hour_meter=Decimal(4880),
                total_cost=Decimal("600.00"),
                parts_used=(
                    PartUsage(item_id="item_demo_1", quantity=Decimal(1)),
                    PartUsage(item_id="item_demo_2", quantity=Decimal(14)),
                ),
            ),
            MaintenanceLog(
                id="maint_demo_2", machine_id="machine_demo_2",
                collaborator_id="collab_demo_2", date=_at(10),
                type=MaintenanceType.PREVENTIVE, hour_meter=Decimal(2150),
                total_cost=Decimal("1250.00"),
                parts_used=(
                    PartUsage(item_id="item_demo_1", quantity=Decimal(1)),
                    PartUsage(item_id="item_demo_3", quantity=Decimal(1)),
                    PartUsage(item_id="item_demo_2", quantity=Decimal(16)),
                ),
            ),
        )

        for log in maintenance_logs:
            items = post_movements(
                items,
                consumption_movements(log.parts_used),
                StockReason.MAINTENANCE_EXIT,
                log.date,
                reference_id=log.id,
            ).items

        machines = tuple(
            reconcile(machine, fuel_logs, maintenance_logs).apply_to(machine)
            for machine in machines
        )

        orders = (
            PurchaseOrder(
                id="po_demo_1", code="PED-000001",
                status=PurchaseOrderStatus.PENDING, request_date=_at(14),
                requester_id="collab_demo_2",
                items=(
                    PurchaseOrderLine(item_id="item_demo_1", quantity=Decimal(6)),
                    PurchaseOrderLine(item_id="item_demo_3", quantity=Decimal(4)),
                ),
                notes="Reposição para revisões de abril",
            ),
        )

        prices = (
            FuelPrice(fuel_type="Diesel S10", price_per_liter=Decimal("5.95"),
                      updated_at=_at(12)),
            FuelPrice(fuel_type="Diesel S500", price_per_liter=Decimal("5.79"),
                      updated_at=_at(12)),
        )

        return replace(
            Farm.empty(),
            name="Fazenda Demonstração",
            machines=machines,
            collaborators=collaborators,
            fuel_logs=fuel_logs,
            maintenance_logs=maintenance_logs,
            fuel_prices=prices,
            warehouse_items=items,
            purchase_orders=orders,
        )
