"""
AgroSync Snapshot Store
=========================
Key-value persistence of the serialized farm document.

    provider     — SnapshotStore protocol, InMemorySnapshotStore
    db_provider  — DjangoSnapshotStore (FarmSnapshot model)
    codec        — Farm <-> JSON document
    errors       — PersistenceFailure, SnapshotDecodeError
"""
