"""
AgroSync Farm Ledger — Command Type Constants
===============================================
One constant per gateway command. Outcomes carry these as command_type.
"""

from __future__ import annotations

FARM_NAME_SET_REQUEST = "farm.name.set.request"

FLEET_MACHINE_ADD_REQUEST = "fleet.machine.add.request"
FLEET_MACHINE_UPDATE_REQUEST = "fleet.machine.update.request"
FLEET_MACHINE_DELETE_REQUEST = "fleet.machine.delete.request"
FLEET_FUEL_LOG_ADD_REQUEST = "fleet.fuel_log.add.request"
FLEET_FUEL_LOG_UPDATE_REQUEST = "fleet.fuel_log.update.request"
FLEET_MAINTENANCE_LOG_ADD_REQUEST = "fleet.maintenance_log.add.request"
FLEET_MAINTENANCE_LOG_UPDATE_REQUEST = "fleet.maintenance_log.update.request"
FLEET_FUEL_PRICES_UPDATE_REQUEST = "fleet.fuel_prices.update.request"

TEAM_COLLABORATOR_ADD_REQUEST = "team.collaborator.add.request"

WAREHOUSE_ITEM_ADD_REQUEST = "warehouse.item.add.request"
WAREHOUSE_ITEM_UPDATE_REQUEST = "warehouse.item.update.request"
WAREHOUSE_ITEM_DELETE_REQUEST = "warehouse.item.delete.request"
WAREHOUSE_STOCK_RECEIVE_REQUEST = "warehouse.stock.receive.request"

PURCHASING_ORDER_ADD_REQUEST = "purchasing.order.add.request"
PURCHASING_ORDER_STATUS_REQUEST = "purchasing.order.status.request"
PURCHASING_ORDER_CANCEL_REQUEST = "purchasing.order.cancel.request"

FARM_COMMAND_TYPES = frozenset({
    FARM_NAME_SET_REQUEST,
    FLEET_MACHINE_ADD_REQUEST,
    FLEET_MACHINE_UPDATE_REQUEST,
    FLEET_MACHINE_DELETE_REQUEST,
    FLEET_FUEL_LOG_ADD_REQUEST,
    FLEET_FUEL_LOG_UPDATE_REQUEST,
    FLEET_MAINTENANCE_LOG_ADD_REQUEST,
    FLEET_MAINTENANCE_LOG_UPDATE_REQUEST,
    FLEET_FUEL_PRICES_UPDATE_REQUEST,
    TEAM_COLLABORATOR_ADD_REQUEST,
    WAREHOUSE_ITEM_ADD_REQUEST,
    WAREHOUSE_ITEM_UPDATE_REQUEST,
    WAREHOUSE_ITEM_DELETE_REQUEST,
    WAREHOUSE_STOCK_RECEIVE_REQUEST,
    PURCHASING_ORDER_ADD_REQUEST,
    PURCHASING_ORDER_STATUS_REQUEST,
    PURCHASING_ORDER_CANCEL_REQUEST,
})
