from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from terrastream.config import DEFAULT_GRID_SCALE
from terrastream.world.chunk import Chunk, ChunkSnapshot
from terrastream.world.grid import ChunkCoord, ChunkKey, chunk_key, snap_to_grid

LOGGER = logging.getLogger(__name__)


class PersistenceStore:
    """Snapshots of every chunk that has been built, keyed by chunk key.

    Entries survive revival, so a chunk can leave and re-enter range any
    number of times and come back identical.
    """

    def __init__(self, *, default_height: float = 0.0, grid_scale: int = DEFAULT_GRID_SCALE) -> None:
        self.default_height = float(default_height)
        self.grid_scale = int(grid_scale)
        self._snapshots: Dict[ChunkKey, ChunkSnapshot] = {}

    def __len__(self) -> int:
        return len(self._snapshots)

    def __contains__(self, key: object) -> bool:
        return key in self._snapshots

    def get(self, key: ChunkKey) -> Optional[ChunkSnapshot]:
        return self._snapshots.get(key)

    def lookup(self, coord: ChunkCoord) -> Optional[ChunkSnapshot]:
        return self._snapshots.get(chunk_key(coord))

    def snapshot(self, chunk: Chunk) -> ChunkSnapshot:
        snap = chunk.snapshot()
        self._snapshots[snap.key] = snap
        return snap

    def export_all(self) -> Dict[ChunkKey, ChunkSnapshot]:
        return dict(self._snapshots)

    def import_all(self, data: Optional[Mapping[Any, Any]]) -> None:
        """Replace the stored set with ``data``.

        Values may be ``ChunkSnapshot`` objects or their ``to_dict`` form. Input
        that is not a mapping yields an empty store; unreadable entries are
        skipped, and so are entries whose coordinates are off the chunk grid.
        Keys are re-derived from each snapshot's coordinates.
        """
        self._snapshots = {}
        if data is None:
            return
        if not isinstance(data, Mapping):
            LOGGER.warning("ignoring saved chunk data of type %s; store left empty", type(data).__name__)
            return

        for raw_key, value in data.items():
            if isinstance(value, ChunkSnapshot):
                snap = value
            elif isinstance(value, Mapping):
                try:
                    snap = ChunkSnapshot.from_dict(value, default_height=self.default_height)
                except (KeyError, TypeError, ValueError):
                    LOGGER.warning("skipping unreadable saved chunk %r", raw_key)
                    continue
            else:
                LOGGER.warning("skipping saved chunk %r of type %s", raw_key, type(value).__name__)
                continue
            if snap_to_grid(snap.coord[0], snap.coord[1], self.grid_scale) != snap.coord:
                LOGGER.warning(
                    "skipping saved chunk %r: %s is not aligned to grid scale %d",
                    raw_key, tuple(snap.coord), self.grid_scale,
                )
                continue
            self._snapshots[snap.key] = snap

    def clear(self) -> None:
        self._snapshots = {}
