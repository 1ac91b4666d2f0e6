"""
AgroSync Snapshot Store - Farm Document Table
=============================================
One row per snapshot key. The document column holds the serialized
farm exactly as the codec produced it; the store never parses it.
"""

from __future__ import annotations

from django.db import models


class FarmSnapshot(models.Model):
    key = models.CharField(max_length=128, unique=True)
    document = models.TextField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "agrosync_farm_snapshots"
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.key} @ {self.updated_at}"
