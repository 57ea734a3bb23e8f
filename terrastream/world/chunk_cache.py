from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from terrastream.world.chunk import Chunk, ChunkSnapshot
from terrastream.world.composer import AssetCatalog, CompositionError, WorldComposer
from terrastream.world.grid import ChunkCoord, ChunkKey, chunk_key, snap_to_grid
from terrastream.world.height import HeightField
from terrastream.world.persistence import PersistenceStore
from terrastream.world.placement import ObjectPlacer

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class MaterializeOutcome:
    chunk: Optional[Chunk]
    created: bool = False  # False when the key was already active or the build failed
    revived: bool = False  # rebuilt from a snapshot instead of generated


class ChunkCache:
    """Active chunks, one per key, and the paths that bring them in and out.

    New chunks come from the height field and object placer; chunks that were
    seen before come back from their snapshot untouched. Recoverable failures
    are logged and queued in ``warnings`` until the caller drains them.
    """

    def __init__(
        self,
        *,
        grid_scale: int,
        height_field: HeightField,
        placer: ObjectPlacer,
        store: PersistenceStore,
        composer: WorldComposer,
        catalog: AssetCatalog | None = None,
    ) -> None:
        self.grid_scale = int(grid_scale)
        self.height_field = height_field
        self.placer = placer
        self.store = store
        self.composer = composer
        self.catalog = catalog or AssetCatalog()
        self._active: Dict[ChunkKey, Chunk] = {}
        self.warnings: List[str] = []

    def __len__(self) -> int:
        return len(self._active)

    def _warn(self, msg: str, *args: object) -> None:
        text = msg % args if args else msg
        LOGGER.warning(text)
        self.warnings.append(text)

    def drain_warnings(self) -> List[str]:
        out, self.warnings = self.warnings, []
        return out

    def set_catalog(self, catalog: AssetCatalog) -> None:
        self.catalog = catalog

    def _normalize(self, coord: ChunkCoord) -> ChunkCoord:
        return snap_to_grid(coord[0], coord[1], self.grid_scale)

    def is_active(self, coord: ChunkCoord) -> bool:
        return chunk_key(self._normalize(coord)) in self._active

    def get(self, coord: ChunkCoord) -> Optional[Chunk]:
        return self._active.get(chunk_key(self._normalize(coord)))

    def active_chunks(self) -> List[Chunk]:
        return list(self._active.values())

    def materialize(self, coord: ChunkCoord) -> MaterializeOutcome:
        coord = self._normalize(coord)
        key = chunk_key(coord)
        existing = self._active.get(key)
        if existing is not None:
            return MaterializeOutcome(chunk=existing)

        saved = self.store.get(key)
        if saved is not None:
            height = saved.height
            placements = saved.placements
        else:
            height = self.height_field.compute_height(coord)
            placements = tuple(self.placer.generate_placements(coord, height))

        if self.catalog.floor is None:
            self._warn("no floor archetype configured; chunk %s not built", key)
            return MaterializeOutcome(chunk=None)
        if placements and self.catalog.object_archetype is None:
            self._warn(
                "object archetype %r missing; chunk %s built without objects",
                self.catalog.object_kind,
                key,
            )

        try:
            result = self.composer.spawn(coord, height, placements, self.catalog)
        except CompositionError as e:
            self._warn("chunk %s not built: %s", key, e)
            return MaterializeOutcome(chunk=None)

        for msg in result.warnings:
            self._warn("chunk %s: %s", key, msg)

        chunk = Chunk(coord=coord, height=height, placements=tuple(placements), handle=result.handle)
        self._active[key] = chunk
        if saved is None:
            self.store.snapshot(chunk)
            LOGGER.debug("generated chunk %s height=%s objects=%d", key, height, len(placements))
        else:
            LOGGER.debug("revived chunk %s height=%s objects=%d", key, height, len(placements))
        return MaterializeOutcome(chunk=chunk, created=True, revived=saved is not None)

    def evict(self, coord: ChunkCoord) -> Optional[ChunkSnapshot]:
        key = chunk_key(self._normalize(coord))
        chunk = self._active.get(key)
        if chunk is None:
            return None

        snap = self.store.snapshot(chunk)
        try:
            self.composer.destroy(chunk.handle)
        except CompositionError as e:
            self._warn("chunk %s representation not destroyed cleanly: %s", key, e)
        del self._active[key]
        LOGGER.debug("evicted chunk %s", key)
        return snap

    def save_all(self) -> Dict[ChunkKey, ChunkSnapshot]:
        """Snapshot every active chunk (without evicting) and export the store."""
        for chunk in self._active.values():
            self.store.snapshot(chunk)
        return self.store.export_all()

    def evict_all(self) -> int:
        coords = [chunk.coord for chunk in self._active.values()]
        for coord in coords:
            self.evict(coord)
        return len(coords)
