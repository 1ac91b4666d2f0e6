"""
AgroSync Farm Ledger
======================
The mutation gateway over the farm aggregate, its id generation and
its demo seed data.
"""

from engines.farm.ids import IdGenerator, SequentialIdGenerator, UuidIdGenerator
from engines.farm.seed import DemoSeedProvider, SeedDataProvider
from engines.farm.service import FarmLedgerService

__all__ = [
    "DemoSeedProvider",
    "FarmLedgerService",
    "IdGenerator",
    "SeedDataProvider",
    "SequentialIdGenerator",
    "UuidIdGenerator",
]
