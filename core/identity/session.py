"""
AgroSync Identity — Session Identity
======================================
The authentication collaborator is external. The ledger only needs to
know whether a session is authenticated (to decide what to load) and
who is acting (for attribution on purchase orders).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SessionIdentity:
    is_authenticated: bool
    user_id: Optional[str] = None
    role: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.is_authenticated, bool):
            raise TypeError("is_authenticated must be bool.")
        if self.is_authenticated and not self.user_id:
            raise ValueError("Authenticated session requires user_id.")

    @classmethod
    def anonymous(cls) -> SessionIdentity:
        return cls(is_authenticated=False)
