"""
AgroSync Farm Ledger — Mutation Gateway
=========================================
FarmLedgerService is the only writer of the farm aggregate.

Every command:
    1. validates its local preconditions (typed FarmCommandError on failure)
    2. runs the reconcilers it needs (hour-meter, stock ledger, PO workflow)
    3. builds a new Farm snapshot and makes it current
    4. writes the serialized snapshot to the store
and returns exactly one MutationOutcome.

A rejected command leaves the current snapshot untouched.
A store failure does not roll back the accepted snapshot; the outcome
reports persisted=False with the failure text.

Single-writer, synchronous. No locks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple, Union

from core.commands.errors import FarmCommandError, InvalidQuantityError, NotFoundError
from core.commands.outcomes import CommandStatus, MutationOutcome
from core.config.settings import LedgerSettings
from core.identity.session import SessionIdentity
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
from core.primitives.values import to_decimal
from core.primitives.warehouse import StockReason, WarehouseItem
from core.snapshot_store.codec import decode_farm, encode_farm
from core.snapshot_store.errors import PersistenceFailure
from core.snapshot_store.provider import SnapshotStore
from core.time.clock import Clock, SystemClock
from core.time.temporal import DateLike, parse_datetime
from engines.farm import commands, ids
from engines.farm.ids import IdGenerator, UuidIdGenerator
from engines.farm.seed import SeedDataProvider
from engines.fleet.reconciler import (
    MachineSummary,
    apply_reading,
    reading_from_fuel_log,
    reading_from_maintenance_log,
    reconcile,
)
from engines.purchasing.numbering import next_order_code
from engines.purchasing.workflow import place_order, transition
from engines.warehouse.ledger import (
    adjust_to,
    consumption_movements,
    edit_movements,
    open_item,
    post_movements,
    receive_invoice,
    validate_parts,
)

logger = logging.getLogger("agrosync.ledger")
snapshot_logger = logging.getLogger("agrosync.snapshots")

POLICY_NAME = "farm_ledger"

Quantity = Union[Decimal, int, float, str]
LineInput = Union[PurchaseOrderLine, Tuple[str, Quantity]]
PartInput = Union[PartUsage, Tuple[str, Quantity]]


# ══════════════════════════════════════════════════════════════
# INTERNAL CHANGE RECORD
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class _Change:
    """What a command body produced; turned into a MutationOutcome by _execute."""
    farm: Farm
    entity_id: Optional[str] = None
    anomalies: Tuple[str, ...] = ()
    persist: bool = True


def _replace_entity(entities: tuple, updated: Any) -> tuple:
    return tuple(updated if e.id == updated.id else e for e in entities)


def _without_entity(entities: tuple, entity_id: str) -> tuple:
    return tuple(e for e in entities if e.id != entity_id)


def _part(value: PartInput) -> PartUsage:
    if isinstance(value, PartUsage):
        return value
    item_id, quantity = value
    return PartUsage(item_id=item_id, quantity=to_decimal(quantity))


def _line(value: LineInput) -> PurchaseOrderLine:
    if isinstance(value, PurchaseOrderLine):
        return value
    item_id, quantity = value
    return PurchaseOrderLine(item_id=item_id, quantity=to_decimal(quantity))


def _missing_items(reason: str, item_ids: Iterable[str]) -> Tuple[str, ...]:
    return tuple(f"{reason}: warehouse item '{item_id}' not found" for item_id in item_ids)


# ══════════════════════════════════════════════════════════════
# FARM LEDGER SERVICE
# ══════════════════════════════════════════════════════════════

class FarmLedgerService:
    """
    Owns the current Farm snapshot and applies commands to it.

    Collaborators are injected: the snapshot store, the clock and the
    id generator. Nothing here reads the system clock or Django settings
    directly.
    """

    def __init__(
        self,
        farm: Optional[Farm] = None,
        *,
        store: SnapshotStore,
        settings: Optional[LedgerSettings] = None,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        session: Optional[SessionIdentity] = None,
    ) -> None:
        self._farm = farm if farm is not None else Farm.empty()
        self._store = store
        self._settings = settings or LedgerSettings()
        self._clock = clock or SystemClock()
        self._ids = id_generator or UuidIdGenerator()
        self._session = session or SessionIdentity.anonymous()

    # ── Loading ───────────────────────────────────────────────

    @classmethod
    def load(
        cls,
        store: SnapshotStore,
        seed_provider: SeedDataProvider,
        session: SessionIdentity,
        *,
        settings: Optional[LedgerSettings] = None,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> FarmLedgerService:
        """
        Build a service from the store.

        Unauthenticated session → empty farm.
        Stored document → decoded (missing collections default to empty).
        Nothing stored → the seed provider's demo farm, unnamed.
        Raises SnapshotDecodeError for a corrupt document.
        """
        settings = settings or LedgerSettings()
        key = settings.snapshot_key

        if not session.is_authenticated:
            farm = Farm.empty()
            snapshot_logger.info("Anonymous session: starting from an empty farm")
        else:
            document = store.get(key)
            if document:
                farm = decode_farm(document, key=key)
                snapshot_logger.info(f"Loaded farm snapshot '{key}'")
            else:
                farm = replace(seed_provider.load(), name=None)
                snapshot_logger.info(
                    f"No snapshot under '{key}': starting from demo data"
                )

        return cls(
            farm,
            store=store,
            settings=settings,
            clock=clock,
            id_generator=id_generator,
            session=session,
        )

    # ── Reads ─────────────────────────────────────────────────

    @property
    def farm(self) -> Farm:
        return self._farm

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    def get_machine_by_id(self, machine_id: str) -> Optional[Machine]:
        return self._farm.machine(machine_id)

    def get_collaborator_by_id(self, collaborator_id: str) -> Optional[Collaborator]:
        return self._farm.collaborator(collaborator_id)

    def get_warehouse_item_by_id(self, item_id: str) -> Optional[WarehouseItem]:
        return self._farm.warehouse_item(item_id)

    # ── Execution core ────────────────────────────────────────

    def _execute(
        self,
        command_type: str,
        body: Callable[[Farm, datetime], _Change],
    ) -> MutationOutcome:
        now = self._clock.now_utc()

        try:
            change = body(self._farm, now)
        except FarmCommandError as exc:
            logger.info(
                f"Command {command_type} REJECTED: "
                f"[{exc.reason.code}] {exc.reason.message}"
            )
            return MutationOutcome(
                command_type=command_type,
                status=CommandStatus.REJECTED,
                occurred_at=now,
                farm=self._farm,
                reason=exc.reason,
                error=exc,
            )

        for anomaly in change.anomalies:
            logger.warning(f"Command {command_type}: {anomaly}")

        if not change.persist:
            logger.info(f"Command {command_type} ACCEPTED (no change)")
            return MutationOutcome(
                command_type=command_type,
                status=CommandStatus.ACCEPTED,
                occurred_at=now,
                farm=self._farm,
                entity_id=change.entity_id,
                anomalies=change.anomalies,
            )

        self._farm = change.farm
        persisted, persistence_error = self._flush()

        logger.info(
            f"Command {command_type} ACCEPTED"
            + (f" (entity {change.entity_id})" if change.entity_id else "")
        )
        return MutationOutcome(
            command_type=command_type,
            status=CommandStatus.ACCEPTED,
            occurred_at=now,
            farm=self._farm,
            entity_id=change.entity_id,
            persisted=persisted,
            persistence_error=persistence_error,
            anomalies=change.anomalies,
        )

    def _flush(self) -> Tuple[bool, Optional[str]]:
        key = self._settings.snapshot_key
        try:
            acknowledged = self._store.set(key, encode_farm(self._farm))
        except Exception as exc:
            failure = PersistenceFailure(key, f"{type(exc).__name__}: {exc}")
            logger.error(str(failure), exc_info=True)
            return False, str(failure)

        if not acknowledged:
            failure = PersistenceFailure(key, "store did not acknowledge the write")
            logger.error(str(failure))
            return False, str(failure)

        snapshot_logger.debug(f"Snapshot '{key}' written")
        return True, None

    def _require_machine(self, farm: Farm, machine_id: str) -> Machine:
        machine = farm.machine(machine_id)
        if machine is None:
            raise NotFoundError("Machine", machine_id, policy_name=POLICY_NAME)
        return machine

    def _require_item(self, farm: Farm, item_id: str) -> WarehouseItem:
        item = farm.warehouse_item(item_id)
        if item is None:
            raise NotFoundError("Warehouse item", item_id, policy_name=POLICY_NAME)
        return item

    def _require_order(self, farm: Farm, order_id: str) -> PurchaseOrder:
        order = farm.purchase_order(order_id)
        if order is None:
            raise NotFoundError("Purchase order", order_id, policy_name=POLICY_NAME)
        return order

    def _new_id(self, kind: str, entities: Iterable[Any]) -> str:
        """Next generated id not already used in the target collection."""
        taken = {entity.id for entity in entities}
        entity_id = self._ids.new_id(kind)
        while entity_id in taken:
            entity_id = self._ids.new_id(kind)
        return entity_id

    def _actor(self, responsible_id: Optional[str]) -> str:
        actor_id = responsible_id or self._session.user_id
        if not actor_id:
            raise ValueError("An acting collaborator id is required.")
        return actor_id

    @staticmethod
    def _reconcile_machines(farm: Farm, machine_ids: Iterable[str]) -> Farm:
        """Full rebuild of every listed machine that still exists."""
        machines = farm.machines
        for machine_id in dict.fromkeys(machine_ids):
            machine = farm.machine(machine_id)
            if machine is None:
                continue
            summary = reconcile(machine, farm.fuel_logs, farm.maintenance_logs)
            machines = _replace_entity(machines, summary.apply_to(machine))
        return replace(farm, machines=machines)

    # ══════════════════════════════════════════════════════════
    # FARM
    # ══════════════════════════════════════════════════════════

    def set_farm_name(self, name: str) -> MutationOutcome:
        def body(farm: Farm, now: datetime) -> _Change:
            return _Change(farm=replace(farm, name=name))

        return self._execute(commands.FARM_NAME_SET_REQUEST, body)

    # ══════════════════════════════════════════════════════════
    # MACHINES
    # ══════════════════════════════════════════════════════════

    def add_machine(
        self,
        name: str,
        *,
        model: str = "",
        brand: str = "",
        year: Optional[int] = None,
        hour_meter: Quantity = 0,
        maintenance_intervals: Optional[MaintenanceIntervals] = None,
    ) -> MutationOutcome:
        initial = to_decimal(hour_meter)

        def body(farm: Farm, now: datetime) -> _Change:
            if initial < 0:
                raise InvalidQuantityError(
                    f"Hour-meter cannot be negative, got {initial}.",
                    policy_name=POLICY_NAME,
                )
            machine = Machine(
                id=self._new_id(ids.MACHINE, farm.machines),
                name=name,
                model=model,
                brand=brand,
                year=year,
                initial_hour_meter=initial,
                hour_meter=initial,
                maintenance_intervals=maintenance_intervals or MaintenanceIntervals(),
            )
            return _Change(
                farm=replace(farm, machines=farm.machines + (machine,)),
                entity_id=machine.id,
            )

        return self._execute(commands.FLEET_MACHINE_ADD_REQUEST, body)

    def update_machine(
        self,
        machine_id: str,
        *,
        name: Optional[str] = None,
        model: Optional[str] = None,
        brand: Optional[str] = None,
        year: Optional[int] = None,
        maintenance_intervals: Optional[MaintenanceIntervals] = None,
    ) -> MutationOutcome:
        """Edit descriptive fields. Hour-meter fields belong to the reconciler."""
        def body(farm: Farm, now: datetime) -> _Change:
            machine = self._require_machine(farm, machine_id)
            changes = {
                field_name: value
                for field_name, value in (
                    ("name", name),
                    ("model", model),
                    ("brand", brand),
                    ("year", year),
                    ("maintenance_intervals", maintenance_intervals),
                )
                if value is not None
            }
            updated = replace(machine, **changes)
            return _Change(
                farm=replace(farm, machines=_replace_entity(farm.machines, updated)),
                entity_id=machine_id,
            )

        return self._execute(commands.FLEET_MACHINE_UPDATE_REQUEST, body)

    def delete_machine(self, machine_id: str) -> MutationOutcome:
        """Remove the machine. Its logs stay and keep referencing its id."""
        def body(farm: Farm, now: datetime) -> _Change:
            self._require_machine(farm, machine_id)
            return _Change(
                farm=replace(farm, machines=_without_entity(farm.machines, machine_id)),
                entity_id=machine_id,
            )

        return self._execute(commands.FLEET_MACHINE_DELETE_REQUEST, body)

    # ══════════════════════════════════════════════════════════
    # COLLABORATORS
    # ══════════════════════════════════════════════════════════

    def add_collaborator(self, name: str, *, role: Optional[str] = None) -> MutationOutcome:
        def body(farm: Farm, now: datetime) -> _Change:
            collaborator = Collaborator(
                id=self._new_id(ids.COLLABORATOR, farm.collaborators),
                name=name,
                role=role,
            )
            return _Change(
                farm=replace(farm, collaborators=farm.collaborators + (collaborator,)),
                entity_id=collaborator.id,
            )

        return self._execute(commands.TEAM_COLLABORATOR_ADD_REQUEST, body)

    # ══════════════════════════════════════════════════════════
    # FUEL LOGS
    # ══════════════════════════════════════════════════════════

    def add_fuel_log(
        self,
        machine_id: str,
        collaborator_id: str,
        date: DateLike,
        odometer: Quantity,
        *,
        liters: Quantity = 0,
        price_per_liter: Quantity = 0,
        total_value: Optional[Quantity] = None,
        fuel_type: str = "",
        notes: str = "",
    ) -> MutationOutcome:
        """
        Record a refill. The odometer becomes a Fuel reading on the machine;
        a backfilled (older) reading is kept in history without moving
        the current hour-meter.
        """
        def body(farm: Farm, now: datetime) -> _Change:
            liters_value = to_decimal(liters)
            price_value = to_decimal(price_per_liter)
            log = FuelLog(
                id=self._new_id(ids.FUEL_LOG, farm.fuel_logs),
                machine_id=machine_id,
                collaborator_id=collaborator_id,
                date=parse_datetime(date),
                odometer=to_decimal(odometer),
                liters=liters_value,
                price_per_liter=price_value,
                total_value=(
                    to_decimal(total_value) if total_value is not None
                    else liters_value * price_value
                ),
                fuel_type=fuel_type,
                notes=notes,
            )
            self._check_fuel_log(log)
            return self._insert_log(
                replace(farm, fuel_logs=farm.fuel_logs + (log,)),
                log.machine_id,
                reading_from_fuel_log(log),
                None,
                log.id,
                "Fuel log",
            )

        return self._execute(commands.FLEET_FUEL_LOG_ADD_REQUEST, body)

    def update_fuel_log(self, updated_log: FuelLog) -> MutationOutcome:
        """Replace a stored fuel log and rebuild the old and new machine."""
        def body(farm: Farm, now: datetime) -> _Change:
            original = farm.fuel_log(updated_log.id)
            if original is None:
                raise NotFoundError("Fuel log", updated_log.id, policy_name=POLICY_NAME)
            self._check_fuel_log(updated_log)

            farm = replace(
                farm, fuel_logs=_replace_entity(farm.fuel_logs, updated_log),
            )
            farm = self._reconcile_machines(
                farm, (original.machine_id, updated_log.machine_id),
            )
            return _Change(
                farm=farm,
                entity_id=updated_log.id,
                anomalies=self._machine_anomalies(farm, updated_log.machine_id, "Fuel log"),
            )

        return self._execute(commands.FLEET_FUEL_LOG_UPDATE_REQUEST, body)

    @staticmethod
    def _check_fuel_log(log: FuelLog) -> None:
        if log.odometer < 0:
            raise InvalidQuantityError(
                f"Odometer cannot be negative, got {log.odometer}.",
                policy_name=POLICY_NAME,
            )
        if log.liters < 0:
            raise InvalidQuantityError(
                f"Liters cannot be negative, got {log.liters}.",
                policy_name=POLICY_NAME,
            )

    @staticmethod
    def _machine_anomalies(farm: Farm, machine_id: str, subject: str) -> Tuple[str, ...]:
        if farm.machine(machine_id) is None:
            return (f"{subject}: machine '{machine_id}' not found",)
        return ()

    def _insert_log(
        self,
        farm: Farm,
        machine_id: str,
        reading,
        maintenance_type: Optional[MaintenanceType],
        log_id: str,
        subject: str,
        anomalies: Tuple[str, ...] = (),
    ) -> _Change:
        """Fast path: fold one new reading into the machine summary."""
        machine = farm.machine(machine_id)
        if machine is None:
            return _Change(
                farm=farm,
                entity_id=log_id,
                anomalies=anomalies + (f"{subject}: machine '{machine_id}' not found",),
            )
        summary = apply_reading(MachineSummary.of(machine), reading, maintenance_type)
        return _Change(
            farm=replace(
                farm,
                machines=_replace_entity(farm.machines, summary.apply_to(machine)),
            ),
            entity_id=log_id,
            anomalies=anomalies,
        )

    # ══════════════════════════════════════════════════════════
    # MAINTENANCE LOGS
    # ══════════════════════════════════════════════════════════

    def add_maintenance_log(
        self,
        machine_id: str,
        collaborator_id: str,
        date: DateLike,
        type: MaintenanceType,
        hour_meter: Quantity,
        *,
        total_cost: Quantity = 0,
        parts_used: Sequence[PartInput] = (),
        notes: str = "",
    ) -> MutationOutcome:
        """
        Record a service: a Maintenance reading on the machine, serviced
        counters raised, and one Maintenance Exit per consumed item.
        """
        def body(farm: Farm, now: datetime) -> _Change:
            log = MaintenanceLog(
                id=self._new_id(ids.MAINTENANCE_LOG, farm.maintenance_logs),
                machine_id=machine_id,
                collaborator_id=collaborator_id,
                date=parse_datetime(date),
                type=type,
                hour_meter=to_decimal(hour_meter),
                total_cost=to_decimal(total_cost),
                parts_used=tuple(_part(p) for p in parts_used),
                notes=notes,
            )
            self._check_maintenance_log(log)

            posting = post_movements(
                farm.warehouse_items,
                consumption_movements(log.parts_used),
                StockReason.MAINTENANCE_EXIT,
                log.date,
                reference_id=log.id,
            )
            farm = replace(
                farm,
                warehouse_items=posting.items,
                maintenance_logs=farm.maintenance_logs + (log,),
            )
            return self._insert_log(
                farm,
                log.machine_id,
                reading_from_maintenance_log(log),
                log.type,
                log.id,
                "Maintenance log",
                _missing_items("Maintenance log", posting.missing_item_ids),
            )

        return self._execute(commands.FLEET_MAINTENANCE_LOG_ADD_REQUEST, body)

    def update_maintenance_log(self, updated_log: MaintenanceLog) -> MutationOutcome:
        """
        Replace a stored service. Stock moves by the net part difference
        (old - new per item, one entry per item); both the old and the new
        machine are rebuilt.
        """
        def body(farm: Farm, now: datetime) -> _Change:
            original = farm.maintenance_log(updated_log.id)
            if original is None:
                raise NotFoundError(
                    "Maintenance log", updated_log.id, policy_name=POLICY_NAME,
                )
            self._check_maintenance_log(updated_log)

            posting = post_movements(
                farm.warehouse_items,
                edit_movements(
                    original.parts_used, updated_log.parts_used, farm.warehouse_items,
                ),
                StockReason.MAINTENANCE_EDIT_ADJUSTMENT,
                now,
                reference_id=updated_log.id,
            )
            farm = replace(
                farm,
                warehouse_items=posting.items,
                maintenance_logs=_replace_entity(farm.maintenance_logs, updated_log),
            )
            farm = self._reconcile_machines(
                farm, (original.machine_id, updated_log.machine_id),
            )
            return _Change(
                farm=farm,
                entity_id=updated_log.id,
                anomalies=(
                    _missing_items("Maintenance log", posting.missing_item_ids)
                    + self._machine_anomalies(
                        farm, updated_log.machine_id, "Maintenance log",
                    )
                ),
            )

        return self._execute(commands.FLEET_MAINTENANCE_LOG_UPDATE_REQUEST, body)

    @staticmethod
    def _check_maintenance_log(log: MaintenanceLog) -> None:
        if log.hour_meter < 0:
            raise InvalidQuantityError(
                f"Hour-meter cannot be negative, got {log.hour_meter}.",
                policy_name=POLICY_NAME,
            )
        validate_parts(log.parts_used)

    # ══════════════════════════════════════════════════════════
    # FUEL PRICES
    # ══════════════════════════════════════════════════════════

    def update_fuel_prices(self, prices: Sequence[FuelPrice]) -> MutationOutcome:
        """Replace the price table. Prices without updated_at are stamped now."""
        def body(farm: Farm, now: datetime) -> _Change:
            stamped = tuple(
                price if price.updated_at is not None else replace(price, updated_at=now)
                for price in prices
            )
            return _Change(farm=replace(farm, fuel_prices=stamped))

        return self._execute(commands.FLEET_FUEL_PRICES_UPDATE_REQUEST, body)

    # ══════════════════════════════════════════════════════════
    # WAREHOUSE
    # ══════════════════════════════════════════════════════════

    def add_warehouse_item(
        self,
        code: str,
        name: str,
        *,
        unit_value: Quantity = 0,
        stock_quantity: Quantity = 0,
    ) -> MutationOutcome:
        def body(farm: Farm, now: datetime) -> _Change:
            item = open_item(
                item_id=self._new_id(ids.WAREHOUSE_ITEM, farm.warehouse_items),
                code=code,
                name=name,
                unit_value=to_decimal(unit_value),
                initial_quantity=to_decimal(stock_quantity),
                created_at=now,
            )
            return _Change(
                farm=replace(farm, warehouse_items=farm.warehouse_items + (item,)),
                entity_id=item.id,
            )

        return self._execute(commands.WAREHOUSE_ITEM_ADD_REQUEST, body)

    def update_warehouse_item(
        self,
        item_id: str,
        *,
        code: Optional[str] = None,
        name: Optional[str] = None,
        unit_value: Optional[Quantity] = None,
        stock_quantity: Optional[Quantity] = None,
    ) -> MutationOutcome:
        """
        Edit descriptive fields. A changed stock quantity is recorded as a
        Manual Adjustment of new - old; the history itself is never edited.
        """
        def body(farm: Farm, now: datetime) -> _Change:
            item = self._require_item(farm, item_id)
            changes = {}
            if code is not None:
                changes["code"] = code
            if name is not None:
                changes["name"] = name
            if unit_value is not None:
                changes["unit_value"] = to_decimal(unit_value)
            updated = replace(item, **changes)
            if stock_quantity is not None:
                updated = adjust_to(updated, to_decimal(stock_quantity), now)
            return _Change(
                farm=replace(
                    farm,
                    warehouse_items=_replace_entity(farm.warehouse_items, updated),
                ),
                entity_id=item_id,
            )

        return self._execute(commands.WAREHOUSE_ITEM_UPDATE_REQUEST, body)

    def delete_warehouse_item(self, item_id: str) -> MutationOutcome:
        def body(farm: Farm, now: datetime) -> _Change:
            self._require_item(farm, item_id)
            return _Change(
                farm=replace(
                    farm,
                    warehouse_items=_without_entity(farm.warehouse_items, item_id),
                ),
                entity_id=item_id,
            )

        return self._execute(commands.WAREHOUSE_ITEM_DELETE_REQUEST, body)

    def add_stock_to_warehouse_item(
        self,
        item_id: str,
        quantity: Quantity,
        invoice_number: str,
    ) -> MutationOutcome:
        """Invoice receipt: +quantity tagged with the invoice number."""
        def body(farm: Farm, now: datetime) -> _Change:
            item = self._require_item(farm, item_id)
            updated = receive_invoice(item, to_decimal(quantity), invoice_number, now)
            return _Change(
                farm=replace(
                    farm,
                    warehouse_items=_replace_entity(farm.warehouse_items, updated),
                ),
                entity_id=item_id,
            )

        return self._execute(commands.WAREHOUSE_STOCK_RECEIVE_REQUEST, body)

    # ══════════════════════════════════════════════════════════
    # PURCHASE ORDERS
    # ══════════════════════════════════════════════════════════

    def add_purchase_order(
        self,
        items: Sequence[LineInput],
        *,
        requester_id: Optional[str] = None,
        notes: str = "",
    ) -> MutationOutcome:
        """Place a PENDING order with the next sequential code."""
        def body(farm: Farm, now: datetime) -> _Change:
            lines = [_line(line) for line in items]
            order = place_order(
                order_id=self._new_id(ids.PURCHASE_ORDER, farm.purchase_orders),
                code=next_order_code(
                    (o.code for o in farm.purchase_orders),
                    self._settings.order_code_prefix,
                    self._settings.order_code_width,
                ),
                requester_id=self._actor(requester_id),
                lines=lines,
                requested_at=now,
                notes=notes,
            )
            unknown = [
                line.item_id for line in lines
                if farm.warehouse_item(line.item_id) is None
            ]
            return _Change(
                farm=replace(farm, purchase_orders=farm.purchase_orders + (order,)),
                entity_id=order.id,
                anomalies=_missing_items(
                    f"Purchase order {order.code}", dict.fromkeys(unknown),
                ),
            )

        return self._execute(commands.PURCHASING_ORDER_ADD_REQUEST, body)

    def update_purchase_order_status(
        self,
        order_id: str,
        status: PurchaseOrderStatus,
        responsible_id: Optional[str] = None,
        *,
        reason: Optional[str] = None,
    ) -> MutationOutcome:
        """
        Move an order along its lifecycle. FULFILLED credits stock once per
        order line; CANCELLED is handled as cancel_purchase_order.
        """
        if status == PurchaseOrderStatus.CANCELLED:
            return self.cancel_purchase_order(order_id, responsible_id, reason=reason)

        def body(farm: Farm, now: datetime) -> _Change:
            order = self._require_order(farm, order_id)
            result = transition(
                order, status, actor_id=self._actor(responsible_id), at=now,
            )
            if not result.changed:
                return _Change(farm=farm, entity_id=order_id, persist=False)

            posting = post_movements(
                farm.warehouse_items,
                result.stock_credits,
                StockReason.PURCHASE_RECEIPT,
                now,
                reference_id=order.id,
                reference_code=order.code,
            )
            return _Change(
                farm=replace(
                    farm,
                    warehouse_items=posting.items,
                    purchase_orders=_replace_entity(farm.purchase_orders, result.order),
                ),
                entity_id=order_id,
                anomalies=_missing_items(
                    f"Purchase order {order.code}", posting.missing_item_ids,
                ),
            )

        return self._execute(commands.PURCHASING_ORDER_STATUS_REQUEST, body)

    def cancel_purchase_order(
        self,
        order_id: str,
        responsible_id: Optional[str] = None,
        *,
        reason: Optional[str] = None,
    ) -> MutationOutcome:
        """Cancel a PENDING or APPROVED order. No stock moves."""
        def body(farm: Farm, now: datetime) -> _Change:
            order = self._require_order(farm, order_id)
            result = transition(
                order,
                PurchaseOrderStatus.CANCELLED,
                actor_id=self._actor(responsible_id),
                at=now,
                reason=reason,
            )
            return _Change(
                farm=replace(
                    farm,
                    purchase_orders=_replace_entity(farm.purchase_orders, result.order),
                ),
                entity_id=order_id,
            )

        return self._execute(commands.PURCHASING_ORDER_CANCEL_REQUEST, body)
