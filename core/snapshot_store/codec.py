"""
AgroSync Snapshot Store - Farm Document Codec
=============================================
Farm <-> JSON text. Decoding merges the stored document over the
empty farm, so documents written before a collection existed still load.
"""

from __future__ import annotations

import json

from core.primitives.farm import Farm
from core.snapshot_store.errors import SnapshotDecodeError


def encode_farm(farm: Farm) -> str:
    return json.dumps(farm.to_dict(), ensure_ascii=False, separators=(",", ":"))


def decode_farm(document: str, *, key: str = "") -> Farm:
    try:
        data = json.loads(document)
    except (TypeError, json.JSONDecodeError) as exc:
        raise SnapshotDecodeError(key, f"invalid JSON ({exc})") from exc

    if not isinstance(data, dict):
        raise SnapshotDecodeError(
            key, f"expected a JSON object, got {type(data).__name__}",
        )

    try:
        return Farm.from_dict(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotDecodeError(key, f"{type(exc).__name__}: {exc}") from exc
