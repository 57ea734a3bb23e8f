"""Shared fixtures for the streaming world tests."""
from __future__ import annotations

import pytest

from terrastream.world.composer import AssetCatalog, InMemoryComposer
from terrastream.world.params import WorldParams
from terrastream.world.world import World


class ManualClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def advance(self, dt: float) -> None:
        self.now += dt


@pytest.fixture
def params() -> WorldParams:
    return WorldParams(grid_scale=128, render_distance=2, world_seed=300)


@pytest.fixture
def catalog() -> AssetCatalog:
    return AssetCatalog(floor="plains", objects={"tree": "oak"})


@pytest.fixture
def composer() -> InMemoryComposer:
    return InMemoryComposer()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def world(params, composer, catalog, clock) -> World:
    return World(params, composer, catalog, clock=clock)
