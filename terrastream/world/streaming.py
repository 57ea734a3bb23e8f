from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from terrastream.util.math import planar_distance
from terrastream.world.chunk_cache import ChunkCache
from terrastream.world.grid import ChunkCoord, candidate_coords
from terrastream.world.params import WorldParams

LOGGER = logging.getLogger(__name__)


@dataclass
class TickResult:
    throttled: bool = False
    queued: int = 0
    materialized: List[ChunkCoord] = field(default_factory=list)
    evicted: List[ChunkCoord] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class StreamingScheduler:
    """Decides, once per tick, which chunks to bring in and which to drop.

    Work per tick is capped (materializations and evictions) so a host loop
    never stalls on a burst of chunks; anything left over is rediscovered on
    the next tick. ``rng`` only drives queue selection and is independent of
    the per-chunk placement streams.
    """

    def __init__(
        self,
        cache: ChunkCache,
        params: WorldParams,
        *,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.cache = cache
        self.params = params
        self.clock = clock
        self.rng = rng if rng is not None else random.Random()
        self._last_tick: Optional[float] = None

    def _throttled(self) -> bool:
        now = self.clock()
        cooldown = float(self.params.cooldown_seconds)
        if cooldown > 0 and self._last_tick is not None and (now - self._last_tick) < cooldown:
            return True
        self._last_tick = now
        return False

    def build_queue(self, x: float, z: float) -> List[ChunkCoord]:
        candidates = candidate_coords(x, z, self.params.grid_scale, self.params.render_distance)
        return [c for c in candidates if not self.cache.is_active(c)]

    def _pick(self, queue: List[ChunkCoord]) -> ChunkCoord:
        if self.params.selection == "random":
            return queue.pop(self.rng.randrange(len(queue)))
        return queue.pop(0)

    def tick(self, x: float, z: float) -> TickResult:
        if self._throttled():
            return TickResult(throttled=True)

        queue = self.build_queue(x, z)
        result = TickResult(queued=len(queue))

        budget = int(self.params.max_materializations_per_tick)
        while queue and budget > 0:
            coord = self._pick(queue)
            budget -= 1
            outcome = self.cache.materialize(coord)
            if outcome.created:
                result.materialized.append(coord)
        # leftovers are dropped; they show up again next tick if still needed

        result.evicted = self.evict_out_of_range(x, z)
        result.warnings = self.cache.drain_warnings()
        if result.materialized or result.evicted:
            LOGGER.debug(
                "tick at (%.1f, %.1f): +%d -%d active=%d queued=%d",
                x, z, len(result.materialized), len(result.evicted), len(self.cache), result.queued,
            )
        return result

    def evict_out_of_range(self, x: float, z: float) -> List[ChunkCoord]:
        radius = self.params.radius
        cap = int(self.params.max_evictions_per_tick)

        selected: List[ChunkCoord] = []
        for chunk in self.cache.active_chunks():
            if planar_distance(chunk.coord.x, chunk.coord.z, x, z) > radius:
                selected.append(chunk.coord)
                if len(selected) >= cap:
                    break

        for coord in selected:
            self.cache.evict(coord)
        return selected
