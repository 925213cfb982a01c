GRID_ROWS = 8
GRID_COLS = 8
TILE_KIND_COUNT = 7
MIN_MATCH = 3

# Hard stop for chained re-matches after a single move. Normal play never gets close.
MAX_CASCADE_DEPTH = 10

# Base score per match group, keyed by group length. Longer groups use the
# open-ended formula in systems.scoring.
MATCH_SCORES = {
    3: 50,
    4: 150,
    5: 300,
    6: 500,
}
LONG_MATCH_STEP = 100

# Linear cascade multiplier: 1x for the triggering match, +0.5x per cascade level.
CASCADE_MULTIPLIER_STEP = 0.5

# Power-up thresholds (group length).
LINE_CLEAR_SIZE = 4
COLOR_CLEAR_SIZE = 5
AREA_CLEAR_MIN_SIZE = 6

# Area clear reaches this many cells in every direction (radius 1 -> 3x3 block).
AREA_CLEAR_RADIUS = 1

# Points awarded per tile removed by an activated power-up.
ACTIVATION_TILE_SCORES = {
    "line_clear": 75,
    "area_clear": 100,
    "color_clear": 125,
}

# Session defaults
DEFAULT_TARGET_SCORE = 5000
DEFAULT_MOVE_LIMIT = 30

# Reshuffle attempts before the board is regenerated from scratch.
SHUFFLE_ATTEMPTS = 10

# Level progression: level 1 uses the configured target, later levels use
# LEVEL_TARGET_BASE * level + LEVEL_TARGET_STEP * (level - 1).
LEVEL_TARGET_BASE = 1000
LEVEL_TARGET_STEP = 500

# Budget boosters
EXTRA_MOVES = 5
EXTRA_TIME = 30.0
