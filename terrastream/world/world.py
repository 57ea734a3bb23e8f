from __future__ import annotations

import random
import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from terrastream.world.chunk import ChunkSnapshot
from terrastream.world.chunk_cache import ChunkCache
from terrastream.world.composer import AssetCatalog, WorldComposer
from terrastream.world.grid import ChunkCoord, ChunkKey
from terrastream.world.height import HeightField
from terrastream.world.params import WorldParams
from terrastream.world.persistence import PersistenceStore
from terrastream.world.placement import ObjectPlacer
from terrastream.world.streaming import StreamingScheduler, TickResult


class World:
    """One streamed world instance: owns the store, the cache and the scheduler.

    Several worlds can live side by side; nothing is shared at module level.
    """

    def __init__(
        self,
        params: WorldParams,
        composer: WorldComposer,
        catalog: AssetCatalog | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
    ) -> None:
        params.validate()
        self.params = params
        self.composer = composer

        self.height_field = HeightField(
            seed=params.world_seed,
            mode=params.noise_mode,
            origin_height=params.origin_height,
            step=params.height_step,
            variation_scale=params.height_variation_scale,
            amplitude=params.noise_amplitude,
            smoothness=params.terrain_smoothness,
        )
        self.placer = ObjectPlacer(
            world_seed=params.world_seed,
            grid_scale=params.grid_scale,
            min_count=params.min_trees_per_chunk,
            max_count=params.max_trees_per_chunk,
            min_distance=params.min_object_distance,
            max_attempts=params.max_placement_attempts,
            footprint_fraction=params.footprint_fraction,
            ground_clearance=params.ground_clearance,
        )
        self.store = PersistenceStore(default_height=params.origin_height, grid_scale=params.grid_scale)
        self.cache = ChunkCache(
            grid_scale=params.grid_scale,
            height_field=self.height_field,
            placer=self.placer,
            store=self.store,
            composer=composer,
            catalog=catalog,
        )
        self.scheduler = StreamingScheduler(self.cache, params, clock=clock, rng=rng)

    def settings(self, catalog: AssetCatalog) -> None:
        self.cache.set_catalog(catalog)

    def update(self, x: float, z: float) -> TickResult:
        return self.scheduler.tick(x, z)

    def is_active(self, coord: ChunkCoord) -> bool:
        return self.cache.is_active(coord)

    @property
    def active_count(self) -> int:
        return len(self.cache)

    def save_all_chunks(self) -> Dict[ChunkKey, ChunkSnapshot]:
        return self.cache.save_all()

    def set_saved_chunk_data(self, data: Optional[Mapping[Any, Any]]) -> None:
        self.store.import_all(data)

    def clear_saved_data(self) -> str:
        self.store.clear()
        return "Cleared all saved chunk data"

    def shutdown(self) -> List[str]:
        """Evict every active chunk and return the warnings nobody drained yet."""
        self.cache.evict_all()
        return self.cache.drain_warnings()
