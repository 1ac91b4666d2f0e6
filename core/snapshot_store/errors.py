"""
AgroSync Snapshot Store - Errors
================================
Failures at the persistence boundary.
"""

from __future__ import annotations


class PersistenceFailure(Exception):
    """The store did not acknowledge a snapshot write."""

    def __init__(self, key: str, detail: str):
        self.key = key
        self.detail = detail
        super().__init__(f"Snapshot '{key}' was not persisted: {detail}")


class SnapshotDecodeError(ValueError):
    """A stored document is not a readable farm snapshot."""

    def __init__(self, key: str, detail: str):
        self.key = key
        self.detail = detail
        super().__init__(f"Snapshot '{key}' could not be decoded: {detail}")
