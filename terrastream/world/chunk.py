from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Tuple

from terrastream.world.grid import ChunkCoord, ChunkKey, chunk_key
from terrastream.world.placement import ObjectPlacement


def _finite(value: Any) -> float:
    out = float(value)
    if not math.isfinite(out):
        raise ValueError(f"non-finite value: {value!r}")
    return out


def _coordinate(value: Any) -> int:
    out = _finite(value)
    if out != math.floor(out):
        raise ValueError(f"fractional chunk coordinate: {value!r}")
    return int(out)


@dataclass(frozen=True)
class ChunkSnapshot:
    coord: ChunkCoord
    height: float
    placements: Tuple[ObjectPlacement, ...] = ()

    @property
    def key(self) -> ChunkKey:
        return chunk_key(self.coord)

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.coord.x,
            "z": self.coord.z,
            "height": self.height,
            "objects": [p.to_dict() for p in self.placements],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, default_height: float) -> "ChunkSnapshot":
        """Build a snapshot from plain data.

        Raises ``KeyError``/``TypeError``/``ValueError`` when the coordinates are
        unusable. A missing, non-numeric or non-finite height falls back to
        ``default_height``; object entries that cannot be read are dropped.
        """
        coord = ChunkCoord(_coordinate(data["x"]), _coordinate(data["z"]))
        try:
            height = _finite(data["height"])
        except (KeyError, TypeError, ValueError):
            height = float(default_height)

        placements = []
        for obj in data.get("objects") or ():
            try:
                placements.append(
                    ObjectPlacement(
                        offset_x=_finite(obj["offset_x"]),
                        offset_y=_finite(obj["offset_y"]),
                        offset_z=_finite(obj["offset_z"]),
                    )
                )
            except (KeyError, TypeError, ValueError):
                continue
        return cls(coord=coord, height=height, placements=tuple(placements))


@dataclass
class Chunk:
    coord: ChunkCoord
    height: float
    placements: Tuple[ObjectPlacement, ...]
    handle: Any = field(default=None, compare=False)  # owned by the composer

    @property
    def key(self) -> ChunkKey:
        return chunk_key(self.coord)

    def snapshot(self) -> ChunkSnapshot:
        return ChunkSnapshot(coord=self.coord, height=self.height, placements=self.placements)
