# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are the defaults the configuration file falls back to, plus the
presentation settings (colors, HUD) that are not part of an experiment.
"""

# Grid settings
# The world is WINDOW_WIDTH x WINDOW_HEIGHT pixels split into square cells.
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600
CELL_SIZE = 5
GRID_WIDTH = WINDOW_WIDTH // CELL_SIZE
GRID_HEIGHT = WINDOW_HEIGHT // CELL_SIZE

# Visualization settings
FPS = 60
BACKGROUND_COLOR = (0, 0, 0)
HUD_COLOR = (255, 255, 255)
HUD_FONT_SIZE = 16

# --- Brush ---
DEFAULT_BRUSH_RADIUS = 5
BRUSH_MIN, BRUSH_MAX = 1, 16

# --- Particle colors ---
# Base RGB color per material. Each painted particle is jittered around it.
SAND_COLOR = (255, 220, 0)
WATER_COLOR = (40, 110, 230)
WOOD_COLOR = (120, 72, 30)

# Saturation jitter in HSL percentage points, lightness jitter likewise.
SATURATION_VARIATION = 20.0
BRIGHTNESS_VARIATION = 2.0

# Run control defaults
MAX_STEPS = 100000
LOG_THROTTLE_STEPS = 300

# Logging defaults, overridden by the "logging" section of config.json
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
LOG_FILE = "logs/falling_sand.log"
LOG_MAX_BYTES = 512 * 1024
LOG_BACKUP_COUNT = 3
