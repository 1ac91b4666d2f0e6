"""
AgroSync Snapshot Store - DB-backed Provider
============================================
Stores farm documents in the FarmSnapshot table.
"""

from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger("agrosync.snapshots")


class DjangoSnapshotStore:
    def get(self, key: str) -> Optional[str]:
        if not isinstance(key, str) or not key.strip():
            return None

        from core.snapshot_store.models import FarmSnapshot

        row = FarmSnapshot.objects.filter(key=key.strip()).first()
        if row is None:
            logger.debug(f"No snapshot stored under '{key}'")
            return None
        return row.document

    def set(self, key: str, document: str) -> bool:
        if not isinstance(key, str) or not key.strip():
            raise ValueError("key must be a non-empty string.")
        if not isinstance(document, str):
            raise TypeError("document must be a string.")

        from core.snapshot_store.models import FarmSnapshot

        _, created = FarmSnapshot.objects.update_or_create(
            key=key.strip(),
            defaults={"document": document},
        )
        logger.debug(
            f"Snapshot '{key}' {'created' if created else 'updated'} "
            f"({len(document)} chars)"
        )
        return True
