"""
AgroSync Command Layer — Public API
=====================================
Every command produces exactly one outcome.
REJECTED commands are first-class results, never silent no-ops.
"""

from core.commands.errors import (
    FarmCommandError,
    InvalidQuantityError,
    InvalidTransitionError,
    NotFoundError,
)
from core.commands.outcomes import (
    CommandStatus,
    MutationOutcome,
)
from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
)

__all__ = [
    "CommandStatus",
    "MutationOutcome",
    "ReasonCode",
    "RejectionReason",
    "FarmCommandError",
    "NotFoundError",
    "InvalidQuantityError",
    "InvalidTransitionError",
]
