"""
AgroSync Core Config — Public API
====================================
Runtime ledger settings bridged from Django settings.
"""

from core.config.settings import LedgerSettings

__all__ = [
    "LedgerSettings",
]
