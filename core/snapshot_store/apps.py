"""
AgroSync Snapshot Store - App Configuration
===========================================
Persistent farm documents keyed by snapshot key.
"""

from django.apps import AppConfig


class CoreSnapshotStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.snapshot_store"
    label = "core_snapshot_store"
    verbose_name = "AgroSync Snapshot Store"
