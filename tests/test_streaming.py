"""Tests for the tick-driven streaming scheduler."""
from __future__ import annotations

import random
from dataclasses import replace

from terrastream.world.grid import ChunkCoord, candidate_coords
from terrastream.world.world import World


def _fill(world: World, x: float, z: float) -> int:
    ticks = 0
    while world.scheduler.build_queue(x, z):
        world.update(x, z)
        ticks += 1
        assert ticks < 500
    return ticks


def test_one_chunk_per_tick_in_scan_order(world) -> None:
    expected = candidate_coords(0.0, 0.0, 128, 2)
    res = world.update(0.0, 0.0)
    assert res.materialized == [expected[0]]
    assert res.queued == len(expected)
    res = world.update(0.0, 0.0)
    assert res.materialized == [expected[1]]
    assert res.queued == len(expected) - 1


def test_fills_every_candidate_then_idles(world) -> None:
    expected = candidate_coords(0.0, 0.0, 128, 2)
    assert _fill(world, 0.0, 0.0) == len(expected)
    assert all(world.is_active(c) for c in expected)
    res = world.update(0.0, 0.0)
    assert res.materialized == [] and res.queued == 0 and res.evicted == []


def test_cooldown_throttles_ticks(params, composer, catalog, clock) -> None:
    world = World(replace(params, cooldown_seconds=1.0), composer, catalog, clock=clock)
    assert len(world.update(0.0, 0.0).materialized) == 1
    clock.advance(0.5)
    res = world.update(0.0, 0.0)
    assert res.throttled
    assert world.active_count == 1
    clock.advance(0.5)
    res = world.update(0.0, 0.0)
    assert not res.throttled
    assert world.active_count == 2


def test_zero_cooldown_never_throttles(world) -> None:
    for _ in range(5):
        assert not world.update(0.0, 0.0).throttled
    assert world.active_count == 5


def test_materialization_cap_can_be_raised(params, composer, catalog, clock) -> None:
    world = World(replace(params, max_materializations_per_tick=3), composer, catalog, clock=clock)
    assert len(world.update(0.0, 0.0).materialized) == 3


def test_random_selection_uses_injected_rng(params, composer, catalog, clock) -> None:
    world = World(replace(params, selection="random"), composer, catalog, clock=clock, rng=random.Random(7))
    queue = candidate_coords(0.0, 0.0, 128, 2)
    expected = queue[random.Random(7).randrange(len(queue))]
    assert world.update(0.0, 0.0).materialized == [expected]


def test_random_selection_does_not_disturb_generation(params, composer, catalog, clock) -> None:
    scan = World(params, composer, catalog, clock=clock)
    rand = World(replace(params, selection="random"), composer, catalog, clock=clock, rng=random.Random(3))
    _fill(scan, 0.0, 0.0)
    _fill(rand, 0.0, 0.0)
    for chunk in scan.cache.active_chunks():
        other = rand.cache.get(chunk.coord)
        assert other is not None
        assert other.height == chunk.height
        assert other.placements == chunk.placements


def test_eviction_is_capped_per_tick(world) -> None:
    _fill(world, 0.0, 0.0)
    near_origin = world.active_count
    assert near_origin == 9

    counts = []
    for _ in range(4):
        res = world.update(10_000.0, 10_000.0)
        counts.append(len(res.evicted))
        assert len(res.materialized) == 1
    assert counts == [3, 3, 3, 0]
    assert all(c.coord.x > 5_000 for c in world.cache.active_chunks())


def test_eviction_runs_without_new_chunks(world) -> None:
    _fill(world, 0.0, 0.0)
    stray = ChunkCoord(1280, 0)
    world.cache.materialize(stray)
    res = world.update(0.0, 0.0)
    assert res.materialized == []
    assert res.evicted == [stray]
    assert not world.is_active(stray)


def test_evict_out_of_range_only_touches_far_chunks(world) -> None:
    _fill(world, 0.0, 0.0)
    assert world.scheduler.evict_out_of_range(0.0, 0.0) == []


def test_walk_away_and_back_restores_chunks(world, composer) -> None:
    _fill(world, 0.0, 0.0)
    before = {c.coord: (c.height, c.placements) for c in world.cache.active_chunks()}

    for _ in range(6):
        world.update(5_000.0, 0.0)
    assert not any(world.is_active(c) for c in before)

    _fill(world, 0.0, 0.0)
    for coord, (height, placements) in before.items():
        chunk = world.cache.get(coord)
        assert chunk is not None
        assert chunk.height == height
        assert chunk.placements == placements
        spawned = composer.spawned[chunk.handle]
        assert len(spawned.objects) == len(placements)


def test_tick_reports_warnings(params, composer, clock) -> None:
    world = World(params, composer, clock=clock)  # no catalog: no floor archetype
    res = world.update(0.0, 0.0)
    assert res.materialized == []
    assert res.warnings and "floor" in res.warnings[0]
    assert world.active_count == 0
