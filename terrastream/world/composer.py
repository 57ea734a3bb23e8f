"""Boundary between the streaming core and whatever builds chunks on screen."""
from __future__ import annotations

from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, Mapping, Protocol, Sequence, Tuple

from terrastream.world.grid import ChunkCoord
from terrastream.world.placement import ObjectPlacement


class CompositionError(Exception):
    """A chunk could not be built by the composer."""


class FloorArchetypeError(CompositionError):
    """The floor archetype cannot be anchored, so the whole chunk is abandoned."""


@dataclass(frozen=True)
class AssetCatalog:
    """Opaque archetype handles. The core only checks presence and passes them on."""

    floor: Any = None
    barrier: Any = None  # carried for composers; boundaries are not streamed
    objects: Mapping[str, Any] = field(default_factory=dict)
    object_kind: str = "tree"

    @property
    def object_archetype(self) -> Any:
        return self.objects.get(self.object_kind)


@dataclass(frozen=True)
class SpawnResult:
    handle: Any
    warnings: Tuple[str, ...] = ()


class WorldComposer(Protocol):
    def spawn(
        self,
        coord: ChunkCoord,
        height: float,
        placements: Sequence[ObjectPlacement],
        catalog: AssetCatalog,
    ) -> SpawnResult: ...

    def destroy(self, handle: Any) -> None: ...


@dataclass
class SpawnedChunk:
    coord: ChunkCoord
    height: float
    objects: Tuple[Tuple[float, float, float], ...]  # absolute positions


class InMemoryComposer:
    """Headless composer: keeps absolute object positions per spawned chunk."""

    def __init__(self) -> None:
        self._ids = count(1)
        self.spawned: Dict[int, SpawnedChunk] = {}
        self.spawn_calls = 0
        self.destroy_calls = 0

    def spawn(
        self,
        coord: ChunkCoord,
        height: float,
        placements: Sequence[ObjectPlacement],
        catalog: AssetCatalog,
    ) -> SpawnResult:
        if catalog.floor is None:
            raise FloorArchetypeError("no floor archetype")
        objects: Tuple[Tuple[float, float, float], ...] = ()
        if catalog.object_archetype is not None:
            objects = tuple(
                (coord.x + p.offset_x, height + p.offset_y, coord.z + p.offset_z) for p in placements
            )
        handle = next(self._ids)
        self.spawned[handle] = SpawnedChunk(coord=coord, height=height, objects=objects)
        self.spawn_calls += 1
        return SpawnResult(handle=handle)

    def destroy(self, handle: Any) -> None:
        self.spawned.pop(handle, None)
        self.destroy_calls += 1
