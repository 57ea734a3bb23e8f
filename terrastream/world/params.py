from __future__ import annotations

from dataclasses import dataclass

from terrastream.config import (
    DEFAULT_GRID_SCALE,
    DEFAULT_RENDER_DISTANCE,
    DEFAULT_ORIGIN_HEIGHT,
    DEFAULT_HEIGHT_STEP,
    DEFAULT_HEIGHT_VARIATION_SCALE,
    DEFAULT_NOISE_AMPLITUDE,
    DEFAULT_TERRAIN_SMOOTHNESS,
    DEFAULT_SEED,
    DEFAULT_NOISE,
    DEFAULT_MIN_TREES_PER_CHUNK,
    DEFAULT_MAX_TREES_PER_CHUNK,
    DEFAULT_MIN_OBJECT_DISTANCE,
    DEFAULT_MAX_PLACEMENT_ATTEMPTS,
    DEFAULT_FOOTPRINT_FRACTION,
    DEFAULT_GROUND_CLEARANCE,
    DEFAULT_COOLDOWN_SECONDS,
    DEFAULT_MAX_MATERIALIZATIONS_PER_TICK,
    DEFAULT_MAX_EVICTIONS_PER_TICK,
    DEFAULT_SELECTION,
)
from terrastream.world.noise import NOISE_MODES

SELECTION_MODES = ("scan", "random")


@dataclass(frozen=True)
class WorldParams:
    """Every knob of a streamed world.

    Treated as fixed for the lifetime of a persisted chunk set: snapshots taken
    under one seed/noise setup are not migrated if these change.
    """

    grid_scale: int = DEFAULT_GRID_SCALE
    render_distance: int = DEFAULT_RENDER_DISTANCE
    origin_height: float = DEFAULT_ORIGIN_HEIGHT
    height_step: float = DEFAULT_HEIGHT_STEP
    height_variation_scale: float = DEFAULT_HEIGHT_VARIATION_SCALE
    noise_amplitude: float = DEFAULT_NOISE_AMPLITUDE
    terrain_smoothness: float = DEFAULT_TERRAIN_SMOOTHNESS
    world_seed: int = DEFAULT_SEED
    noise_mode: str = DEFAULT_NOISE

    min_trees_per_chunk: int = DEFAULT_MIN_TREES_PER_CHUNK
    max_trees_per_chunk: int = DEFAULT_MAX_TREES_PER_CHUNK
    min_object_distance: float = DEFAULT_MIN_OBJECT_DISTANCE
    max_placement_attempts: int = DEFAULT_MAX_PLACEMENT_ATTEMPTS
    footprint_fraction: float = DEFAULT_FOOTPRINT_FRACTION
    ground_clearance: float = DEFAULT_GROUND_CLEARANCE

    cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS
    max_materializations_per_tick: int = DEFAULT_MAX_MATERIALIZATIONS_PER_TICK
    max_evictions_per_tick: int = DEFAULT_MAX_EVICTIONS_PER_TICK
    selection: str = DEFAULT_SELECTION

    @property
    def radius(self) -> float:
        """Streaming radius in world units."""
        return float(self.render_distance * self.grid_scale)

    def validate(self) -> None:
        if self.grid_scale <= 0:
            raise ValueError("grid_scale must be > 0")
        if self.render_distance < 0:
            raise ValueError("render_distance must be >= 0")
        if self.height_step <= 0:
            raise ValueError("height_step must be > 0")
        if self.terrain_smoothness <= 0:
            raise ValueError("terrain_smoothness must be > 0")
        if self.noise_mode not in NOISE_MODES:
            raise ValueError(f"noise_mode must be one of {NOISE_MODES}")
        if self.min_trees_per_chunk < 0:
            raise ValueError("min_trees_per_chunk must be >= 0")
        if self.min_trees_per_chunk > self.max_trees_per_chunk:
            raise ValueError("min_trees_per_chunk must not exceed max_trees_per_chunk")
        if self.min_object_distance < 0:
            raise ValueError("min_object_distance must be >= 0")
        if self.max_placement_attempts < 1:
            raise ValueError("max_placement_attempts must be >= 1")
        if not 0.0 < self.footprint_fraction <= 1.0:
            raise ValueError("footprint_fraction must be in (0, 1]")
        if self.cooldown_seconds < 0:
            raise ValueError("cooldown_seconds must be >= 0")
        if self.max_materializations_per_tick < 1:
            raise ValueError("max_materializations_per_tick must be >= 1")
        if self.max_evictions_per_tick < 1:
            raise ValueError("max_evictions_per_tick must be >= 1")
        if self.selection not in SELECTION_MODES:
            raise ValueError(f"selection must be one of {SELECTION_MODES}")
