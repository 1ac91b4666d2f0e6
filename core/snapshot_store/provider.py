"""
AgroSync Snapshot Store - Provider Protocol
===========================================
Opaque key-value transport for the serialized farm document.

`set` returns True when the write was acknowledged. Implementations may
also raise; the ledger service treats both as a persistence failure.
"""

from __future__ import annotations

from typing import Dict, Optional, Protocol


class SnapshotStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...  # pragma: no cover

    def set(self, key: str, document: str) -> bool:
        ...  # pragma: no cover


class InMemorySnapshotStore:
    """Dict-backed store for tests and single-process use."""

    def __init__(self, documents: Optional[Dict[str, str]] = None) -> None:
        self._documents: Dict[str, str] = dict(documents or {})

    def get(self, key: str) -> Optional[str]:
        return self._documents.get(key)

    def set(self, key: str, document: str) -> bool:
        if not isinstance(document, str):
            raise TypeError("document must be a string.")
        self._documents[key] = document
        return True

    def keys(self) -> tuple[str, ...]:
        return tuple(sorted(self._documents))
