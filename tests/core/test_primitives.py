"""
Tests for core.primitives — farm entities and the stored document format.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.primitives import (
    Collaborator,
    Farm,
    FuelLog,
    HourMeterReading,
    HourMeterSource,
    LastMaintenance,
    Machine,
    MaintenanceComponent,
    MaintenanceIntervals,
    MaintenanceLog,
    MaintenanceType,
    PartUsage,
    PurchaseOrder,
    PurchaseOrderLine,
    PurchaseOrderStatus,
    StockHistoryEntry,
    StockReason,
    WarehouseItem,
)
from core.primitives.values import to_decimal, to_number

NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


# ══════════════════════════════════════════════════════════════
# VALUES
# ══════════════════════════════════════════════════════════════

class TestValues:
    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_rejects_bool(self):
        with pytest.raises(ValueError, match="Boolean"):
            to_decimal(True)

    def test_rejects_nan(self):
        with pytest.raises(ValueError, match="finite"):
            to_decimal("NaN")

    def test_rejects_text(self):
        with pytest.raises(ValueError, match="Not a numeric"):
            to_decimal("ten")

    def test_to_number_integral(self):
        assert to_number(Decimal("12.000")) == 12
        assert isinstance(to_number(Decimal("12.000")), int)

    def test_to_number_fractional(self):
        assert to_number(Decimal("5.89")) == 5.89


# ══════════════════════════════════════════════════════════════
# MACHINE
# ══════════════════════════════════════════════════════════════

class TestLastMaintenance:
    def test_raised_only_upwards(self):
        counters = LastMaintenance(engine_oil_hour=Decimal(500))
        raised = counters.raised(
            [MaintenanceComponent.ENGINE_OIL, MaintenanceComponent.AIR_FILTER],
            Decimal(400),
        )
        assert raised.engine_oil_hour == Decimal(500)
        assert raised.air_filter_hour == Decimal(400)

    def test_raised_without_change_returns_same(self):
        counters = LastMaintenance(engine_oil_hour=Decimal(500))
        assert counters.raised([MaintenanceComponent.ENGINE_OIL], Decimal(100)) is counters

    def test_document_keys(self):
        assert set(LastMaintenance().to_dict()) == {
            "engineOilHour", "transmissionOilHour", "fuelFilterHour", "airFilterHour",
        }


class TestMaintenanceIntervals:
    def test_rejects_non_positive(self):
        with pytest.raises(ValueError, match="must be positive"):
            MaintenanceIntervals(engine_oil_hour=Decimal(0))

    def test_untracked_components_omitted(self):
        intervals = MaintenanceIntervals(engine_oil_hour=Decimal(250))
        assert intervals.to_dict() == {"engineOilHour": 250}


class TestMachine:
    def test_rejects_empty_name(self):
        with pytest.raises(ValueError, match="name"):
            Machine(id="m1", name="")

    def test_history_must_be_tuple(self):
        with pytest.raises(TypeError, match="tuple"):
            Machine(id="m1", name="Tractor", hour_meter_history=[])

    def test_legacy_document_without_initial_hour_meter(self):
        machine = Machine.from_dict({"id": "m1", "name": "Tractor", "hourMeter": 1200})
        assert machine.initial_hour_meter == Decimal(1200)
        assert machine.hour_meter == Decimal(1200)

    def test_legacy_source_labels(self):
        reading = HourMeterReading.from_dict({
            "date": "2024-03-01T08:00:00.000Z",
            "value": 100,
            "source": "Abastecimento",
            "sourceId": "fuel_1",
        })
        assert reading.source == HourMeterSource.FUEL

        reading = HourMeterReading.from_dict({
            "date": "2024-03-01T08:00:00.000Z",
            "value": 100,
            "source": "Manutenção",
            "sourceId": "maint_1",
        })
        assert reading.source == HourMeterSource.MAINTENANCE


# ══════════════════════════════════════════════════════════════
# LOGS
# ══════════════════════════════════════════════════════════════

class TestMaintenanceType:
    def test_serviced_components(self):
        assert MaintenanceType.OIL_CHANGE.serviced_components == {
            MaintenanceComponent.ENGINE_OIL,
        }
        assert MaintenanceType.FILTER_CHANGE.serviced_components == {
            MaintenanceComponent.FUEL_FILTER, MaintenanceComponent.AIR_FILTER,
        }
        assert MaintenanceType.OIL_AND_FILTER.serviced_components == {
            MaintenanceComponent.ENGINE_OIL,
            MaintenanceComponent.FUEL_FILTER,
            MaintenanceComponent.AIR_FILTER,
        }
        assert MaintenanceType.PREVENTIVE.serviced_components == set(MaintenanceComponent)
        assert MaintenanceType.CORRECTIVE.serviced_components == frozenset()


class TestLogs:
    def test_fuel_log_requires_decimal(self):
        with pytest.raises(TypeError, match="odometer"):
            FuelLog(
                id="fuel_1", machine_id="m1", collaborator_id="c1",
                date=NOW, odometer=100,
            )

    def test_maintenance_log_document(self):
        log = MaintenanceLog(
            id="maint_1", machine_id="m1", collaborator_id="c1", date=NOW,
            type=MaintenanceType.OIL_CHANGE, hour_meter=Decimal("1250.5"),
            total_cost=Decimal(600),
            parts_used=(PartUsage(item_id="item_1", quantity=Decimal(2)),),
        )
        data = log.to_dict()
        assert data["hourMeter"] == 1250.5
        assert data["partsUsed"] == [{"itemId": "item_1", "quantity": 2}]
        assert MaintenanceLog.from_dict(data) == log

    def test_naive_dates_read_as_utc(self):
        naive = datetime(2024, 3, 2, 9, 0)
        fuel = FuelLog(
            id="fuel_1", machine_id="m1", collaborator_id="c1",
            date=naive, odometer=Decimal(100),
        )
        service = MaintenanceLog(
            id="maint_1", machine_id="m1", collaborator_id="c1", date=naive,
            type=MaintenanceType.CORRECTIVE, hour_meter=Decimal(100),
        )
        expected = datetime(2024, 3, 2, 9, 0, tzinfo=timezone.utc)
        assert fuel.date == expected
        assert fuel.date.tzinfo is timezone.utc
        assert service.date == expected
        assert service.date.tzinfo is timezone.utc


# ══════════════════════════════════════════════════════════════
# WAREHOUSE
# ══════════════════════════════════════════════════════════════

class TestStockHistoryEntry:
    def test_rejects_zero_change(self):
        with pytest.raises(ValueError, match="cannot be zero"):
            StockHistoryEntry(
                date=NOW, quantity_change=Decimal(0), new_stock_level=Decimal(5),
                reason=StockReason.MANUAL_ADJUSTMENT,
            )

    @pytest.mark.parametrize("label, reason", [
        ("Entrada Inicial", StockReason.INITIAL_ENTRY),
        ("Entrada via Nota Fiscal", StockReason.INVOICE_ENTRY),
        ("Saída Manutenção", StockReason.MAINTENANCE_EXIT),
        ("Ajuste Edição Manutenção", StockReason.MAINTENANCE_EDIT_ADJUSTMENT),
        ("Ajuste Manual de Estoque", StockReason.MANUAL_ADJUSTMENT),
    ])
    def test_legacy_reason_labels(self, label, reason):
        entry = StockHistoryEntry.from_dict({
            "date": "2024-03-01T08:00:00.000Z",
            "quantityChange": 1,
            "newStockLevel": 1,
            "reason": label,
        })
        assert entry.reason == reason

    def test_legacy_purchase_label_keeps_order_code(self):
        entry = StockHistoryEntry.from_dict({
            "date": "2024-03-01T08:00:00.000Z",
            "quantityChange": 6,
            "newStockLevel": 10,
            "reason": "Entrada Compra PED-000004",
            "referenceId": "po_4",
        })
        assert entry.reason == StockReason.PURCHASE_RECEIPT
        assert entry.reference_code == "PED-000004"
        assert entry.reference_id == "po_4"


class TestWarehouseItem:
    def test_history_total(self):
        item = WarehouseItem(
            id="item_1", code="FLT-001", name="Oil filter",
            stock_quantity=Decimal(7),
            stock_history=(
                StockHistoryEntry(NOW, Decimal(10), Decimal(10), StockReason.INITIAL_ENTRY),
                StockHistoryEntry(NOW, Decimal(-3), Decimal(7), StockReason.MAINTENANCE_EXIT),
            ),
        )
        assert item.history_total == Decimal(7)


# ══════════════════════════════════════════════════════════════
# FARM
# ══════════════════════════════════════════════════════════════

class TestFarm:
    def test_empty(self):
        farm = Farm.empty()
        assert farm.name is None
        assert farm.machines == ()

    def test_lookup_missing_returns_none(self):
        farm = Farm(collaborators=(Collaborator(id="c1", name="Ana"),))
        assert farm.collaborator("c1").name == "Ana"
        assert farm.collaborator("c2") is None
        assert farm.machine("m1") is None

    def test_partial_document_merges_over_empty(self):
        farm = Farm.from_dict({"name": "Fazenda", "machines": []})
        assert farm.name == "Fazenda"
        assert farm.purchase_orders == ()
        assert farm.fuel_prices == ()

    def test_document_round_trip(self):
        order = PurchaseOrder(
            id="po_1", code="PED-000001", status=PurchaseOrderStatus.APPROVED,
            request_date=NOW, requester_id="c1",
            items=(PurchaseOrderLine(item_id="item_1", quantity=Decimal(3)),),
            approval_date=NOW, approved_by_id="c2",
        )
        farm = Farm(
            name="Fazenda",
            collaborators=(Collaborator(id="c1", name="Ana", role="Mechanic"),),
            purchase_orders=(order,),
        )
        data = farm.to_dict()
        assert data["purchaseOrders"][0]["approvalDate"] == "2024-03-15T12:00:00.000Z"
        assert "fulfilledDate" not in data["purchaseOrders"][0]
        assert Farm.from_dict(data) == farm
