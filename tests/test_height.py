"""Tests for the noise sources and the stepped height field."""
from __future__ import annotations

import numpy as np
import pytest

from terrastream.world.grid import ChunkCoord
from terrastream.world.height import HeightField
from terrastream.world.noise import SimplexNoise2D, ValueNoise2D, make_noise

COORDS = [ChunkCoord(x, z) for x in range(-768, 769, 128) for z in range(-512, 513, 256)]


def _is_step_multiple(h: float, origin: float, step: float) -> bool:
    k = (h - origin) / step
    return k == pytest.approx(round(k))


@pytest.mark.parametrize("mode", ["fast", "simplex"])
def test_height_is_deterministic_and_stepped(mode: str) -> None:
    a = HeightField(seed=300, mode=mode)
    b = HeightField(seed=300, mode=mode)
    for c in COORDS:
        h = a.compute_height(c)
        assert h == a.compute_height(c)
        assert h == b.compute_height(c)
        assert _is_step_multiple(h, 0.0, 4.0)


def test_height_seed_300_at_origin() -> None:
    first = HeightField(seed=300, step=4.0, origin_height=0.0).compute_height(ChunkCoord(0, 0))
    second = HeightField(seed=300, step=4.0, origin_height=0.0).compute_height(ChunkCoord(0, 0))
    assert first == second
    assert first % 4.0 == 0.0


def test_height_offset_from_origin_and_bounded() -> None:
    hf = HeightField(seed=7, origin_height=2.5, step=4.0, amplitude=10.0, variation_scale=1.0)
    for c in COORDS:
        h = hf.compute_height(c)
        assert _is_step_multiple(h, 2.5, 4.0)
        assert -14.0 <= h - 2.5 <= 10.0


def test_height_independent_of_call_order() -> None:
    hf = HeightField(seed=300)
    forward = [hf.compute_height(c) for c in COORDS]
    backward = [hf.compute_height(c) for c in reversed(COORDS)]
    assert forward == list(reversed(backward))


def test_seed_changes_terrain() -> None:
    a = HeightField(seed=1)
    b = HeightField(seed=2)
    assert [a.compute_height(c) for c in COORDS] != [b.compute_height(c) for c in COORDS]


@pytest.mark.parametrize("noise", [ValueNoise2D(11), SimplexNoise2D(11)])
def test_noise_range(noise) -> None:
    rng = np.random.default_rng(0)
    x = rng.uniform(-500.0, 500.0, size=64)
    z = rng.uniform(-500.0, 500.0, size=64)
    for px, pz in zip(x, z):
        assert -1.0 <= noise.value(float(px), float(pz)) <= 1.0


def test_value_noise_is_continuous() -> None:
    noise = ValueNoise2D(5)
    a = noise.value(10.25, -3.5)
    b = noise.value(10.25 + 1e-6, -3.5)
    assert abs(a - b) < 1e-3


def test_make_noise_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError):
        make_noise("perlin", 1)
