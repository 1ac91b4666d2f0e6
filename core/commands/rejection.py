"""
AgroSync Command Layer — Rejection Model
==========================================
Structured reasons for commands the ledger refuses to apply.

A rejection is not an exception crossing the service boundary.
It travels on the MutationOutcome so the caller always learns
why the aggregate was left unchanged.

Every rejection is:
- Deterministic (same farm + same command → same rejection)
- Machine-readable (code)
- Human-readable (message)
- Attributable (policy_name: the check that refused it)
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for command rejection.

    Fields:
        code:        Machine-readable rejection code (e.g. 'NOT_FOUND').
        message:     Human-readable explanation.
        policy_name: Name of the check that caused rejection.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    NOT_FOUND = "NOT_FOUND"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INVALID_TRANSITION = "INVALID_TRANSITION"
