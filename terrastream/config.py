from __future__ import annotations

# Window (viewer)
WINDOW_WIDTH = 1024
WINDOW_HEIGHT = 768
FPS_CAP = 60  # 0 = uncapped

# App
APP_VERSION = "0.4.1"

# Terrain / chunks
DEFAULT_GRID_SCALE = 128  # world units per chunk side
DEFAULT_RENDER_DISTANCE = 6  # in chunks
DEFAULT_ORIGIN_HEIGHT = 0.0
DEFAULT_HEIGHT_STEP = 4.0
DEFAULT_HEIGHT_VARIATION_SCALE = 1.0  # lower value = flatter world
DEFAULT_NOISE_AMPLITUDE = 10.0
DEFAULT_TERRAIN_SMOOTHNESS = 3.0
DEFAULT_SEED = 300
DEFAULT_NOISE = "fast"  # "fast" | "simplex"

# Objects (trees)
DEFAULT_MIN_TREES_PER_CHUNK = 2
DEFAULT_MAX_TREES_PER_CHUNK = 7
DEFAULT_MIN_OBJECT_DISTANCE = 10.0
DEFAULT_MAX_PLACEMENT_ATTEMPTS = 20
DEFAULT_FOOTPRINT_FRACTION = 0.8  # centred sub-region of the chunk used for objects
DEFAULT_GROUND_CLEARANCE = 78.897  # object pivot above the chunk surface
CHUNK_SEED_X = 1000
CHUNK_SEED_Z = 10

# Streaming
DEFAULT_COOLDOWN_SECONDS = 0.0  # 0 = process every tick
DEFAULT_MAX_MATERIALIZATIONS_PER_TICK = 1
DEFAULT_MAX_EVICTIONS_PER_TICK = 3
DEFAULT_SELECTION = "scan"  # "scan" | "random"

# Viewer
DEFAULT_PIXELS_PER_UNIT = 0.45
DEFAULT_MOVE_SPEED = 260.0  # world units / sec
DEFAULT_CAM_SMOOTH_K = 6.0
DEFAULT_FLOOR_COLOR = (86, 140, 70)
DEFAULT_TREE_COLOR = (24, 70, 30)

# Headless run
DEFAULT_HEADLESS_TICKS = 600
DEFAULT_HEADLESS_STEP = 16.0  # observer advance per tick (world units)
