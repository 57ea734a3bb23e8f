from __future__ import annotations

import numpy as np
from opensimplex import OpenSimplex

NOISE_MODES = ("fast", "simplex")


class ValueNoise2D:
    """Seeded lattice value noise in [-1, 1], evaluated in float64.

    Each integer corner gets a pseudo-random value from a seed-mixed hash;
    points in between blend the four corners with a quintic fade. Chunk
    heights only ever sample one point per chunk, so ``value`` is the hot
    path and ``grid`` is the array form it delegates to.
    """

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)

    @staticmethod
    def _fade(t: np.ndarray) -> np.ndarray:
        # smootherstep
        return t * t * t * (t * (t * 6 - 15) + 10)

    def _hash(self, xi: np.ndarray, zi: np.ndarray) -> np.ndarray:
        # corner values in [0, 1]; the seed is masked to 32 bits so negative seeds work
        x = (xi.astype(np.uint32) * np.uint32(374761393)) ^ (zi.astype(np.uint32) * np.uint32(668265263)) ^ np.uint32(self.seed & 0xFFFFFFFF)
        x ^= (x >> np.uint32(13))
        x *= np.uint32(1274126177)
        x ^= (x >> np.uint32(16))
        return x.astype(np.float64) / np.float64(2**32 - 1)

    def grid(self, x: np.ndarray, z: np.ndarray) -> np.ndarray:
        # x,z: float arrays (same shape)
        x = np.asarray(x, dtype=np.float64)
        z = np.asarray(z, dtype=np.float64)
        xf0 = np.floor(x)
        zf0 = np.floor(z)
        xi0 = xf0.astype(np.int64)
        zi0 = zf0.astype(np.int64)
        xi1 = xi0 + 1
        zi1 = zi0 + 1

        u = self._fade(x - xf0)
        v = self._fade(z - zf0)

        a = self._hash(xi0, zi0)
        b = self._hash(xi1, zi0)
        c = self._hash(xi0, zi1)
        d = self._hash(xi1, zi1)

        # bilinear interpolation with fade
        ab = a + (b - a) * u
        cd = c + (d - c) * u
        n = ab + (cd - ab) * v  # [0,1]
        return np.clip(n * 2.0 - 1.0, -1.0, 1.0)

    def value(self, x: float, z: float) -> float:
        return float(self.grid(np.array([x]), np.array([z]))[0])


class SimplexNoise2D:
    """OpenSimplex gradient noise. Slower, smoother hills."""

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self._simp = OpenSimplex(self.seed)

    def value(self, x: float, z: float) -> float:
        return max(-1.0, min(1.0, float(self._simp.noise2(x, z))))


def make_noise(mode: str, seed: int) -> ValueNoise2D | SimplexNoise2D:
    if mode == "simplex":
        return SimplexNoise2D(seed)
    if mode == "fast":
        return ValueNoise2D(seed)
    raise ValueError(f"unknown noise mode: {mode!r} (expected one of {NOISE_MODES})")
