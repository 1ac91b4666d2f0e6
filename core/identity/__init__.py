"""
AgroSync Identity - Public API
==============================
Session identity handed in by the authentication collaborator.
"""

from core.identity.session import SessionIdentity

__all__ = [
    "SessionIdentity",
]
