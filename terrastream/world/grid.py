from __future__ import annotations

import math
from typing import List, NamedTuple, Tuple

from terrastream.util.math import planar_distance

ChunkKey = Tuple[int, int]


class ChunkCoord(NamedTuple):
    """Grid-aligned chunk origin. Both components are multiples of the grid scale."""

    x: int
    z: int


def snap_to_grid(x: float, z: float, scale: int) -> ChunkCoord:
    # round-half-up on both axes, so -64 -> 0 and 64 -> 128 for scale 128
    sx = int(math.floor(x / scale + 0.5)) * int(scale)
    sz = int(math.floor(z / scale + 0.5)) * int(scale)
    return ChunkCoord(sx, sz)


def chunk_key(coord: ChunkCoord) -> ChunkKey:
    return (int(coord[0]), int(coord[1]))


def candidate_coords(x: float, z: float, scale: int, render_distance: int) -> List[ChunkCoord]:
    """Chunk coordinates that should be active around an observer at (x, z).

    Scans a square lattice of ``(render_distance + 1) ** 2`` points centred on the
    snapped observer position and keeps, in scan order, the snapped coordinates
    lying within ``render_distance * scale`` of the observer.
    """
    center = snap_to_grid(x, z, scale)
    radius = render_distance * scale
    half = radius * 0.5

    out: List[ChunkCoord] = []
    seen: set[ChunkKey] = set()
    for i in range(render_distance + 1):
        for j in range(render_distance + 1):
            px = center.x + i * scale - half
            pz = center.z + j * scale - half
            coord = snap_to_grid(px, pz, scale)
            key = chunk_key(coord)
            if key in seen:
                continue
            seen.add(key)
            if planar_distance(coord.x, coord.z, x, z) <= radius:
                out.append(coord)
    return out
