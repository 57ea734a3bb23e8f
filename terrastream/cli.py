from __future__ import annotations

import argparse
import logging
import random

from terrastream.config import (
    APP_VERSION,
    DEFAULT_SEED,
    DEFAULT_GRID_SCALE,
    DEFAULT_RENDER_DISTANCE,
    DEFAULT_ORIGIN_HEIGHT,
    DEFAULT_HEIGHT_STEP,
    DEFAULT_HEIGHT_VARIATION_SCALE,
    DEFAULT_TERRAIN_SMOOTHNESS,
    DEFAULT_NOISE,
    DEFAULT_MIN_TREES_PER_CHUNK,
    DEFAULT_MAX_TREES_PER_CHUNK,
    DEFAULT_MIN_OBJECT_DISTANCE,
    DEFAULT_COOLDOWN_SECONDS,
    DEFAULT_MAX_EVICTIONS_PER_TICK,
    DEFAULT_SELECTION,
    DEFAULT_MOVE_SPEED,
    DEFAULT_HEADLESS_TICKS,
    DEFAULT_HEADLESS_STEP,
    DEFAULT_FLOOR_COLOR,
    DEFAULT_TREE_COLOR,
)
from terrastream.app import TopDownComposer, run_app
from terrastream.savefile import load_snapshots, save_snapshots
from terrastream.world.composer import AssetCatalog, InMemoryComposer
from terrastream.world.params import WorldParams
from terrastream.world.world import World

LOGGER = logging.getLogger("terrastream")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="terrastream", description=f"Streamed procedural chunk world v{APP_VERSION}")
    p.add_argument("--seed", default=str(DEFAULT_SEED), help="int seed or 'random' (default: 300)")
    p.add_argument("--grid-scale", type=int, default=DEFAULT_GRID_SCALE, help="chunk side length in world units")
    p.add_argument("--render-distance", type=int, default=DEFAULT_RENDER_DISTANCE, help="streaming radius in chunks")
    p.add_argument("--origin-height", type=float, default=DEFAULT_ORIGIN_HEIGHT, help="base ground height")
    p.add_argument("--height-step", type=float, default=DEFAULT_HEIGHT_STEP, help="terrace step height")
    p.add_argument("--height-variation", type=float, default=DEFAULT_HEIGHT_VARIATION_SCALE, help="lower value = flatter world")
    p.add_argument("--smoothness", type=float, default=DEFAULT_TERRAIN_SMOOTHNESS, help="noise domain divisor")
    p.add_argument("--noise", choices=["fast", "simplex"], default=DEFAULT_NOISE, help="height noise mode (fast or simplex)")
    p.add_argument("--min-trees", type=int, default=DEFAULT_MIN_TREES_PER_CHUNK, help="minimum trees drawn per chunk")
    p.add_argument("--max-trees", type=int, default=DEFAULT_MAX_TREES_PER_CHUNK, help="maximum trees drawn per chunk")
    p.add_argument("--tree-distance", type=float, default=DEFAULT_MIN_OBJECT_DISTANCE, help="minimum distance between trees")
    p.add_argument("--cooldown", type=float, default=DEFAULT_COOLDOWN_SECONDS, help="seconds between streaming passes (0 = every tick)")
    p.add_argument("--max-evictions", type=int, default=DEFAULT_MAX_EVICTIONS_PER_TICK, help="chunks unloaded per tick at most")
    p.add_argument("--selection", choices=["scan", "random"], default=DEFAULT_SELECTION, help="which queued chunk to build first")
    p.add_argument("--load", metavar="PATH", help="seed saved chunks from a JSON save file")
    p.add_argument("--save", metavar="PATH", help="write all chunk snapshots to a JSON save file on exit")
    p.add_argument("--headless", action="store_true", help="walk the observer along +X without a window")
    p.add_argument("--ticks", type=int, default=DEFAULT_HEADLESS_TICKS, help="headless: number of ticks")
    p.add_argument("--step", type=float, default=DEFAULT_HEADLESS_STEP, help="headless: observer advance per tick")
    p.add_argument("--speed", type=float, default=DEFAULT_MOVE_SPEED, help="viewer: observer speed (world units / sec)")
    p.add_argument("--debug", action="store_true", help="verbose logging")
    return p.parse_args(argv)


def _params_from_args(args: argparse.Namespace, seed: int) -> WorldParams:
    return WorldParams(
        grid_scale=int(args.grid_scale),
        render_distance=int(args.render_distance),
        origin_height=float(args.origin_height),
        height_step=float(args.height_step),
        height_variation_scale=float(args.height_variation),
        terrain_smoothness=float(args.smoothness),
        world_seed=seed,
        noise_mode=str(args.noise),
        min_trees_per_chunk=int(args.min_trees),
        max_trees_per_chunk=int(args.max_trees),
        min_object_distance=float(args.tree_distance),
        cooldown_seconds=float(args.cooldown),
        max_evictions_per_tick=int(args.max_evictions),
        selection=str(args.selection),
    )


def run_headless(world: World, *, ticks: int, step: float) -> None:
    """Walk out along +X and back to the origin, reporting what streamed."""
    world.settings(AssetCatalog(floor=DEFAULT_FLOOR_COLOR, objects={"tree": DEFAULT_TREE_COLOR}))
    built = evicted = warned = 0
    half = max(1, ticks // 2)
    for i in range(ticks):
        x = step * (i if i < half else (ticks - i))
        res = world.update(x, 0.0)
        built += len(res.materialized)
        evicted += len(res.evicted)
        warned += len(res.warnings)
    LOGGER.info(
        "headless run: ticks=%d built=%d evicted=%d warnings=%d active=%d saved=%d",
        ticks, built, evicted, warned, world.active_count, len(world.store),
    )


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )
    if isinstance(args.seed, str) and args.seed.lower() == "random":
        seed = random.randint(0, 2**31 - 1)
    else:
        seed = int(args.seed)

    params = _params_from_args(args, seed)

    if args.headless:
        composer = InMemoryComposer()
        world = World(params, composer)
    else:
        composer = TopDownComposer(grid_scale=params.grid_scale)
        world = World(params, composer)

    if args.load:
        data = load_snapshots(args.load)
        world.set_saved_chunk_data(data)
        LOGGER.info("loaded %d saved chunks from %s", len(world.store), args.load)

    if args.headless:
        run_headless(world, ticks=int(args.ticks), step=float(args.step))
        for warning in world.shutdown():
            LOGGER.warning("shutdown: %s", warning)
    else:
        run_app(world=world, composer=composer, speed=float(args.speed), debug=bool(args.debug))

    if args.save:
        n = save_snapshots(args.save, world.save_all_chunks())
        LOGGER.info("saved %d chunks to %s", n, args.save)


if __name__ == "__main__":
    main()
