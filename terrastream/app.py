from __future__ import annotations

import logging
import time
from itertools import count
from typing import Any, Dict, Sequence

import pygame

from terrastream.config import (
    WINDOW_WIDTH, WINDOW_HEIGHT, FPS_CAP,
    DEFAULT_PIXELS_PER_UNIT, DEFAULT_MOVE_SPEED, DEFAULT_CAM_SMOOTH_K,
    DEFAULT_FLOOR_COLOR, DEFAULT_TREE_COLOR,
)
from terrastream.util.math import exp_smooth, lerp_color
from terrastream.world.composer import AssetCatalog, FloorArchetypeError, SpawnResult
from terrastream.world.grid import ChunkCoord
from terrastream.world.placement import ObjectPlacement
from terrastream.world.world import World

LOGGER = logging.getLogger(__name__)


def _is_color(value: Any) -> bool:
    return (
        isinstance(value, tuple)
        and len(value) == 3
        and all(isinstance(c, int) and 0 <= c <= 255 for c in value)
    )


class TopDownComposer:
    """Keeps per-chunk draw lists for the top-down view. Archetypes are RGB colours."""

    def __init__(self, *, grid_scale: int) -> None:
        self.grid_scale = int(grid_scale)
        self._ids = count(1)
        self.chunks: Dict[int, dict] = {}

    def spawn(
        self,
        coord: ChunkCoord,
        height: float,
        placements: Sequence[ObjectPlacement],
        catalog: AssetCatalog,
    ) -> SpawnResult:
        if not _is_color(catalog.floor):
            raise FloorArchetypeError(f"floor archetype {catalog.floor!r} is not an RGB colour")

        warnings: list[str] = []
        tree_color = catalog.object_archetype
        trees: list[tuple[float, float]] = []
        if tree_color is not None:
            for p in placements:
                if not _is_color(tree_color):
                    warnings.append(f"object archetype {tree_color!r} is not an RGB colour; object skipped")
                    continue
                trees.append((coord.x + p.offset_x, coord.z + p.offset_z))

        handle = next(self._ids)
        self.chunks[handle] = {
            "coord": coord,
            "height": float(height),
            "floor": catalog.floor,
            "tree_color": tree_color,
            "trees": trees,
        }
        return SpawnResult(handle=handle, warnings=tuple(warnings))

    def destroy(self, handle: Any) -> None:
        self.chunks.pop(handle, None)

    def draw(self, surf: pygame.Surface, cam_x: float, cam_z: float, ppu: float) -> None:
        w, h = surf.get_size()
        half = self.grid_scale * 0.5
        side = max(1, int(self.grid_scale * ppu) - 1)
        for ch in self.chunks.values():
            coord = ch["coord"]
            sx = int(w * 0.5 + (coord.x - half - cam_x) * ppu)
            sy = int(h * 0.5 + (coord.z - half - cam_z) * ppu)
            # shade by height: lower is darker
            t = 0.5 + ch["height"] / 40.0
            color = lerp_color((20, 30, 20), ch["floor"], t)
            pygame.draw.rect(surf, color, pygame.Rect(sx, sy, side, side))
            for tx, tz in ch["trees"]:
                px = int(w * 0.5 + (tx - cam_x) * ppu)
                py = int(h * 0.5 + (tz - cam_z) * ppu)
                pygame.draw.circle(surf, ch["tree_color"], (px, py), max(2, int(3 * ppu)))


def run_app(
    *,
    world: World,
    composer: TopDownComposer,
    start_x: float = 0.0,
    start_z: float = 0.0,
    speed: float = DEFAULT_MOVE_SPEED,
    ppu: float = DEFAULT_PIXELS_PER_UNIT,
    debug: bool = False,
) -> None:
    pygame.init()
    flags = pygame.RESIZABLE
    screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT), flags)
    pygame.display.set_caption(f"terrastream (seed={world.params.world_seed})")

    world.settings(AssetCatalog(floor=DEFAULT_FLOOR_COLOR, objects={"tree": DEFAULT_TREE_COLOR}))

    pygame.font.init()
    font = pygame.font.SysFont("Menlo", 14) or pygame.font.Font(None, 14)
    clock = pygame.time.Clock()

    x, z = float(start_x), float(start_z)
    cam_x, cam_z = x, z
    running = True
    last_t = time.perf_counter()
    last_log = last_t

    try:
        while running:
            now = time.perf_counter()
            dt = min(now - last_t, 0.05)
            last_t = now

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    screen = pygame.display.set_mode((max(64, event.w), max(64, event.h)), flags)

            keys = pygame.key.get_pressed()
            dx = float(keys[pygame.K_RIGHT]) - float(keys[pygame.K_LEFT])
            dz = float(keys[pygame.K_DOWN]) - float(keys[pygame.K_UP])
            x += dx * speed * dt
            z += dz * speed * dt
            cam_x = exp_smooth(cam_x, x, DEFAULT_CAM_SMOOTH_K, dt)
            cam_z = exp_smooth(cam_z, z, DEFAULT_CAM_SMOOTH_K, dt)

            world.update(x, z)

            screen.fill((12, 14, 20))
            composer.draw(screen, cam_x, cam_z, ppu)
            w, h = screen.get_size()
            obs = (int(w * 0.5 + (x - cam_x) * ppu), int(h * 0.5 + (z - cam_z) * ppu))
            pygame.draw.circle(screen, (240, 200, 60), obs, 5)
            pygame.draw.circle(screen, (90, 90, 120), obs, int(world.params.radius * ppu), 1)

            lines = [
                f"x={x:.0f} z={z:.0f}",
                f"active={world.active_count} saved={len(world.store)}",
            ]
            y = 6
            for line in lines:
                screen.blit(font.render(line, True, (255, 255, 255)), (6, y))
                y += font.get_linesize()

            if debug and now - last_log >= 1.0:
                last_log = now
                LOGGER.debug("observer=(%.0f, %.0f) active=%d saved=%d", x, z, world.active_count, len(world.store))

            pygame.display.flip()
            if FPS_CAP and FPS_CAP > 0:
                clock.tick(FPS_CAP)
            else:
                clock.tick()
    finally:
        for warning in world.shutdown():
            LOGGER.warning("shutdown: %s", warning)
        pygame.quit()
