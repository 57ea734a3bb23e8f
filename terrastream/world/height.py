from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from terrastream.world.grid import ChunkCoord
from terrastream.world.noise import ValueNoise2D, SimplexNoise2D, make_noise


@dataclass
class HeightField:
    """Stepped terrain height per chunk.

    Pure: the height of a coordinate depends only on the fields below, never on
    call order, so a regenerated chunk always lands where it did before.
    """

    seed: int
    mode: str = "fast"  # "fast" | "simplex"
    origin_height: float = 0.0
    step: float = 4.0
    variation_scale: float = 1.0
    amplitude: float = 10.0
    smoothness: float = 3.0

    noise: ValueNoise2D | SimplexNoise2D = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.noise = make_noise(self.mode, self.seed)

    def compute_height(self, coord: ChunkCoord) -> float:
        x, z = coord
        n = self.noise.value(x / float(self.smoothness), z / float(self.smoothness))
        variation = n * float(self.variation_scale) * float(self.amplitude)
        steps = int(np.floor(variation / float(self.step)))
        return float(self.origin_height) + steps * float(self.step)
