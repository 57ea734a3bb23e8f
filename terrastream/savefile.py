"""JSON save files for exported chunk snapshots."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from terrastream.world.chunk import ChunkSnapshot

LOGGER = logging.getLogger(__name__)

SAVE_VERSION = 1


def save_snapshots(path: str | Path, data: Mapping[Any, ChunkSnapshot]) -> int:
    payload = {
        "version": SAVE_VERSION,
        "chunks": [snap.to_dict() for snap in data.values()],
    }
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle)
    return len(payload["chunks"])


def load_snapshots(path: str | Path) -> Dict[Tuple[Any, Any], Dict[str, Any]]:
    """Read a save file into the plain-data form ``PersistenceStore.import_all`` accepts.

    Entries are keyed by their (x, z) pair. A missing or unreadable file loads
    as an empty set.
    """
    path = Path(path)
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, json.JSONDecodeError) as e:
        LOGGER.warning("could not read save file %s: %s", path, e)
        return {}

    chunks = payload.get("chunks") if isinstance(payload, dict) else None
    if not isinstance(chunks, list):
        LOGGER.warning("save file %s has no chunk list", path)
        return {}

    out: Dict[Tuple[Any, Any], Dict[str, Any]] = {}
    for entry in chunks:
        if not (isinstance(entry, dict) and "x" in entry and "z" in entry):
            continue
        key = (entry["x"], entry["z"])
        try:
            hash(key)
        except TypeError:
            LOGGER.warning("skipping chunk with unusable coordinates in %s: %r", path, key)
            continue
        out[key] = entry
    return out
