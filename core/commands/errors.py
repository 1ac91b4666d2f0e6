"""
AgroSync Command Layer — Typed Command Errors
===============================================
Reconcilers and state machines raise these when a command cannot be
applied. The Mutation Gateway catches FarmCommandError and turns it
into a REJECTED outcome; nothing is swallowed.

Each error carries the RejectionReason it becomes.
"""

from __future__ import annotations

from core.commands.rejection import ReasonCode, RejectionReason


class FarmCommandError(Exception):
    """Base error for commands the ledger refuses to apply."""

    code: str = "COMMAND_REJECTED"

    def __init__(self, message: str, *, policy_name: str):
        self.reason = RejectionReason(
            code=self.code,
            message=message,
            policy_name=policy_name,
        )
        super().__init__(message)


class NotFoundError(FarmCommandError):
    """A machine, collaborator, item, log or order id does not resolve."""

    code = ReasonCode.NOT_FOUND

    def __init__(self, entity: str, entity_id: str, *, policy_name: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} '{entity_id}' not found.",
            policy_name=policy_name,
        )


class InvalidQuantityError(FarmCommandError):
    """A quantity that must be positive (or non-negative) is not."""

    code = ReasonCode.INVALID_QUANTITY


class InvalidTransitionError(FarmCommandError):
    """A purchase order status change not permitted from its current state."""

    code = ReasonCode.INVALID_TRANSITION

    def __init__(
        self,
        from_state: str,
        to_state: str,
        *,
        subject: str,
        policy_name: str,
    ):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"{subject} cannot move from {from_state} to {to_state}.",
            policy_name=policy_name,
        )

