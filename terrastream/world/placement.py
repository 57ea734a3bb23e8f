"""Deterministic scattering of objects (trees) inside a chunk footprint."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Tuple

from terrastream.config import CHUNK_SEED_X, CHUNK_SEED_Z
from terrastream.world.grid import ChunkCoord


@dataclass(frozen=True)
class ObjectPlacement:
    """Object position relative to its chunk origin (X/Z) and chunk height (Y)."""

    offset_x: float
    offset_y: float
    offset_z: float

    def to_dict(self) -> dict[str, float]:
        return {"offset_x": self.offset_x, "offset_y": self.offset_y, "offset_z": self.offset_z}


def chunk_seed(coord: ChunkCoord, world_seed: int) -> int:
    return coord[0] * CHUNK_SEED_X + coord[1] * CHUNK_SEED_Z + int(world_seed)


def _is_clear(accepted: List[Tuple[float, float]], x: float, z: float, min_dist2: float) -> bool:
    for ax, az in accepted:
        dx = x - ax
        dz = z - az
        if dx * dx + dz * dz < min_dist2:
            return False
    return True


class ObjectPlacer:
    """Rejection-sampled, chunk-seeded placement generator.

    Each chunk gets its own ``random.Random`` stream seeded from its coordinate,
    so the same chunk always proposes the same candidates no matter what else
    has consumed randomness in between. The result may hold fewer objects than
    the drawn count: a slot whose attempts all collide is dropped.
    """

    def __init__(
        self,
        *,
        world_seed: int,
        grid_scale: float,
        min_count: int = 2,
        max_count: int = 7,
        min_distance: float = 10.0,
        max_attempts: int = 20,
        footprint_fraction: float = 0.8,
        ground_clearance: float = 0.0,
    ) -> None:
        self.world_seed = int(world_seed)
        self.grid_scale = float(grid_scale)
        self.min_count = int(min_count)
        self.max_count = int(max_count)
        self.min_distance = float(min_distance)
        self.max_attempts = int(max_attempts)
        self.footprint_fraction = float(footprint_fraction)
        self.ground_clearance = float(ground_clearance)

    def rng_for_chunk(self, coord: ChunkCoord) -> random.Random:
        return random.Random(chunk_seed(coord, self.world_seed))

    def generate_placements(self, coord: ChunkCoord, height: float) -> List[ObjectPlacement]:
        # height is carried implicitly: offset_y is measured from the chunk surface
        rng = self.rng_for_chunk(coord)
        count = rng.randint(self.min_count, self.max_count)
        span = self.grid_scale * self.footprint_fraction
        min_dist2 = self.min_distance * self.min_distance

        accepted: List[Tuple[float, float]] = []
        for _ in range(count):
            for _attempt in range(self.max_attempts):
                ox = (rng.random() - 0.5) * span
                oz = (rng.random() - 0.5) * span
                if _is_clear(accepted, ox, oz, min_dist2):
                    accepted.append((ox, oz))
                    break

        return [ObjectPlacement(offset_x=ox, offset_y=self.ground_clearance, offset_z=oz) for ox, oz in accepted]
