"""
AgroSync — Hour-Meter Reconciler Tests
========================================
Most-recent-wins ordering, counter rebuild, and equality of the insert
fast path with a full reconcile.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.primitives import (
    FuelLog,
    HourMeterSource,
    Machine,
    MaintenanceComponent,
    MaintenanceIntervals,
    MaintenanceLog,
    MaintenanceType,
)
from engines.fleet import (
    MachineSummary,
    apply_reading,
    maintenance_due,
    overdue_components,
    reading_from_fuel_log,
    reading_from_maintenance_log,
    reconcile,
)

MACHINE = Machine(
    id="machine_1", name="Trator 01",
    initial_hour_meter=Decimal(50), hour_meter=Decimal(50),
)


def _at(month: int, day: int) -> datetime:
    return datetime(2024, month, day, 8, 0, tzinfo=timezone.utc)


def _fuel(log_id, when, odometer, machine_id="machine_1"):
    return FuelLog(
        id=log_id, machine_id=machine_id, collaborator_id="collab_1",
        date=when, odometer=Decimal(odometer),
    )


def _service(log_id, when, hour_meter, kind, machine_id="machine_1"):
    return MaintenanceLog(
        id=log_id, machine_id=machine_id, collaborator_id="collab_2",
        date=when, type=kind, hour_meter=Decimal(hour_meter),
    )


# ══════════════════════════════════════════════════════════════
# FULL RECONCILE
# ══════════════════════════════════════════════════════════════

class TestReconcile:
    def test_no_logs_falls_back_to_initial_hour_meter(self):
        summary = reconcile(MACHINE, (), ())
        assert summary.hour_meter == Decimal(50)
        assert summary.hour_meter_history == ()

    def test_most_recent_wins_not_max(self):
        fuel = _fuel("fuel_1", _at(3, 1), 120)
        service = _service("maint_1", _at(2, 15), 200, MaintenanceType.OIL_CHANGE)

        summary = reconcile(MACHINE, [fuel], [service])

        assert summary.hour_meter == Decimal(120)
        assert [r.source_id for r in summary.hour_meter_history] == ["fuel_1", "maint_1"]

    def test_same_date_higher_value_first(self):
        summary = reconcile(
            MACHINE,
            [_fuel("fuel_1", _at(3, 1), 110), _fuel("fuel_2", _at(3, 1), 130)],
            [],
        )
        assert summary.hour_meter == Decimal(130)

    def test_ignores_other_machines(self):
        summary = reconcile(
            MACHINE,
            [_fuel("fuel_1", _at(3, 1), 120), _fuel("fuel_2", _at(3, 9), 999, "machine_2")],
            [],
        )
        assert summary.hour_meter == Decimal(120)
        assert len(summary.hour_meter_history) == 1

    def test_readings_carry_source(self):
        summary = reconcile(
            MACHINE,
            [_fuel("fuel_1", _at(3, 1), 120)],
            [_service("maint_1", _at(3, 2), 125, MaintenanceType.CORRECTIVE)],
        )
        head = summary.hour_meter_history[0]
        assert head.source == HourMeterSource.MAINTENANCE
        assert head.source_id == "maint_1"
        assert head.collaborator_id == "collab_2"

    def test_counters_rebuilt_from_scratch(self):
        services = [
            _service("maint_1", _at(1, 10), 300, MaintenanceType.OIL_CHANGE),
            _service("maint_2", _at(2, 10), 250, MaintenanceType.FILTER_CHANGE),
            _service("maint_3", _at(3, 10), 400, MaintenanceType.PREVENTIVE),
            _service("maint_4", _at(3, 20), 450, MaintenanceType.CORRECTIVE),
        ]
        stale = MACHINE.last_maintenance.raised(
            [MaintenanceComponent.ENGINE_OIL], Decimal(9999),
        )
        machine = Machine(id="machine_1", name="Trator 01", last_maintenance=stale)

        counters = reconcile(machine, [], services).last_maintenance

        assert counters.engine_oil_hour == Decimal(400)
        assert counters.transmission_oil_hour == Decimal(400)
        assert counters.fuel_filter_hour == Decimal(400)
        assert counters.air_filter_hour == Decimal(400)

    def test_counter_keeps_max_not_most_recent(self):
        services = [
            _service("maint_1", _at(1, 10), 500, MaintenanceType.OIL_CHANGE),
            _service("maint_2", _at(2, 10), 450, MaintenanceType.OIL_CHANGE),
        ]
        counters = reconcile(MACHINE, [], services).last_maintenance
        assert counters.engine_oil_hour == Decimal(500)

    def test_oil_and_filter_leaves_transmission(self):
        counters = reconcile(
            MACHINE, [], [_service("maint_1", _at(1, 10), 300, MaintenanceType.OIL_AND_FILTER)],
        ).last_maintenance
        assert counters.engine_oil_hour == Decimal(300)
        assert counters.fuel_filter_hour == Decimal(300)
        assert counters.air_filter_hour == Decimal(300)
        assert counters.transmission_oil_hour == Decimal(0)


# ══════════════════════════════════════════════════════════════
# INSERT FAST PATH
# ══════════════════════════════════════════════════════════════

class TestApplyReading:
    def test_backfilled_reading_does_not_move_current(self):
        summary = reconcile(MACHINE, [_fuel("fuel_1", _at(3, 1), 120)], [])
        older = _service("maint_1", _at(2, 15), 200, MaintenanceType.OIL_CHANGE)

        updated = apply_reading(summary, reading_from_maintenance_log(older), older.type)

        assert updated.hour_meter == Decimal(120)
        assert updated.hour_meter_history[-1].source_id == "maint_1"
        assert updated.last_maintenance.engine_oil_hour == Decimal(200)

    def test_newer_reading_becomes_current(self):
        summary = MachineSummary.of(MACHINE)
        updated = apply_reading(summary, reading_from_fuel_log(_fuel("fuel_1", _at(3, 1), 40)))
        assert updated.hour_meter == Decimal(40)

    def test_maintenance_type_only_for_maintenance_readings(self):
        with pytest.raises(ValueError, match="Maintenance readings only"):
            apply_reading(
                MachineSummary.of(MACHINE),
                reading_from_fuel_log(_fuel("fuel_1", _at(3, 1), 40)),
                MaintenanceType.OIL_CHANGE,
            )

    def test_insert_sequence_equals_full_reconcile(self):
        fuel_logs = [
            _fuel("fuel_1", _at(3, 1), 120),
            _fuel("fuel_2", _at(1, 5), 80),
            _fuel("fuel_3", _at(3, 1), 118),
            _fuel("fuel_4", _at(4, 2), 160),
        ]
        services = [
            _service("maint_1", _at(2, 15), 200, MaintenanceType.OIL_CHANGE),
            _service("maint_2", _at(3, 20), 150, MaintenanceType.PREVENTIVE),
            _service("maint_3", _at(4, 2), 160, MaintenanceType.FILTER_CHANGE),
        ]
        events = [
            ("fuel", fuel_logs[0]), ("maint", services[0]), ("fuel", fuel_logs[1]),
            ("maint", services[1]), ("fuel", fuel_logs[2]), ("maint", services[2]),
            ("fuel", fuel_logs[3]),
        ]

        summary = MachineSummary.of(MACHINE)
        for kind, log in events:
            if kind == "fuel":
                summary = apply_reading(summary, reading_from_fuel_log(log))
            else:
                summary = apply_reading(summary, reading_from_maintenance_log(log), log.type)

        assert summary == reconcile(MACHINE, fuel_logs, services)


# ══════════════════════════════════════════════════════════════
# MAINTENANCE DUE
# ══════════════════════════════════════════════════════════════

class TestMaintenanceDue:
    def _machine(self):
        machine = Machine(
            id="machine_1", name="Trator 01",
            maintenance_intervals=MaintenanceIntervals(
                engine_oil_hour=Decimal(250), air_filter_hour=Decimal(500),
            ),
        )
        summary = reconcile(
            machine,
            [_fuel("fuel_1", _at(3, 1), 1100)],
            [_service("maint_1", _at(2, 1), 800, MaintenanceType.OIL_AND_FILTER)],
        )
        return summary.apply_to(machine)

    def test_only_tracked_components(self):
        due = maintenance_due(self._machine())
        assert [d.component for d in due] == [
            MaintenanceComponent.ENGINE_OIL, MaintenanceComponent.AIR_FILTER,
        ]

    def test_hours_remaining(self):
        oil, air = maintenance_due(self._machine())
        assert oil.hours_since_service == Decimal(300)
        assert oil.hours_remaining == Decimal(-50)
        assert oil.is_overdue
        assert air.hours_remaining == Decimal(200)
        assert not air.is_overdue

    def test_overdue_components(self):
        assert overdue_components(self._machine()) == (MaintenanceComponent.ENGINE_OIL,)
