"""
AgroSync Command Layer — Mutation Outcome Contract
====================================================
Every gateway command produces exactly one MutationOutcome.

ACCEPTED → the new farm snapshot is the current state.
REJECTED → the farm is unchanged, reason is mandatory.

Persistence is reported separately from acceptance:
an ACCEPTED outcome with persisted=False means the in-memory state
was updated but the snapshot did not reach the store.

Rules:
- Outcome is immutable (frozen dataclass)
- REJECTED must carry a RejectionReason
- ACCEPTED must NOT carry a reason
- A REJECTED outcome is never persisted
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Tuple

from core.commands.errors import FarmCommandError
from core.commands.rejection import RejectionReason


# ══════════════════════════════════════════════════════════════
# COMMAND STATUS
# ══════════════════════════════════════════════════════════════

class CommandStatus(Enum):
    """Binary command decision. No middle ground."""
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


# ══════════════════════════════════════════════════════════════
# MUTATION OUTCOME
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MutationOutcome:
    """
    Result of one gateway command.

    Fields:
        command_type:      e.g. 'fleet.fuel_log.add.request'.
        status:            ACCEPTED or REJECTED.
        reason:            RejectionReason (mandatory if REJECTED).
        occurred_at:       When the decision was made.
        farm:              Farm snapshot after the command (unchanged if REJECTED).
        entity_id:         Id of the entity the command created, if any.
        persisted:         True when the store acknowledged the snapshot.
        persistence_error: Store failure description (ACCEPTED but not durable).
        anomalies:         Tolerated dangling references met while applying.
    """

    command_type: str
    status: CommandStatus
    occurred_at: datetime
    farm: Any
    reason: Optional[RejectionReason] = None
    entity_id: Optional[str] = None
    persisted: bool = False
    persistence_error: Optional[str] = None
    anomalies: Tuple[str, ...] = ()
    error: Optional[FarmCommandError] = field(
        default=None, compare=False, repr=False,
    )

    def __post_init__(self):
        if not isinstance(self.status, CommandStatus):
            raise ValueError(
                f"status must be CommandStatus, got {type(self.status).__name__}."
            )

        if self.status == CommandStatus.REJECTED and self.reason is None:
            raise ValueError(
                "REJECTED outcome must include a RejectionReason. "
                "No silent rejections allowed."
            )

        if self.status == CommandStatus.ACCEPTED and self.reason is not None:
            raise ValueError(
                "ACCEPTED outcome must NOT include a RejectionReason."
            )

        if self.status == CommandStatus.REJECTED and self.persisted:
            raise ValueError("REJECTED outcome cannot be persisted.")

        if not isinstance(self.occurred_at, datetime):
            raise ValueError("occurred_at must be a datetime.")

    @property
    def is_accepted(self) -> bool:
        return self.status == CommandStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == CommandStatus.REJECTED

    @property
    def is_durable(self) -> bool:
        """Accepted and written to the store."""
        return self.is_accepted and self.persisted

    def raise_for_rejection(self) -> None:
        """Raise the typed error behind a REJECTED outcome; no-op otherwise."""
        if not self.is_rejected:
            return
        if self.error is not None:
            raise self.error
        raise FarmCommandError(
            self.reason.message, policy_name=self.reason.policy_name,
        )
