GRID_ROWS = 8
GRID_COLS = 8
BOTTOM_MARGIN = 20

# Board maximum footprint relative to window (percentage of window width/height).
BOARD_MAX_WIDTH_PCT = 0.75
BOARD_MAX_HEIGHT_PCT = 0.85

# Height of the score strip drawn above the board.
HUD_HEIGHT = 48

# Match-3 rules
TILE_KINDS = 6
INITIAL_MOVES = 24
POINTS_PER_TILE = 10
CASCADE_BONUS_PER_STEP = 0.25  # +25% per cascade step beyond the first
MIN_RUN = 3
LINE_SPECIAL_RUN = 4
BOMB_RUN = 5
BOMB_RADIUS = 1

# Heuristic ceilings; the invariants they protect are best-effort only.
INITIAL_BOARD_RETRIES = 20
SHUFFLE_CLEAR_PASSES = 10
MAX_CASCADE_DEPTH = 50

# Session extras
UNDO_DEPTH = 10
STARTING_HAMMERS = 3
LEVEL_TARGET_SCORE = 1000
LEVEL_TARGET_GROWTH = 1.5

# Presentation pacing in seconds (all may be zero).
SWAP_REVERT_DELAY = 0.18
CLEAR_DELAY = 0.24
COLLAPSE_DELAY = 0.12
REFILL_DELAY = 0.12

# Sliding puzzle
PUZZLE_SIZE = 4
SHUFFLE_WALK_STEPS = 1000

# Input
DRAG_THRESHOLD = 12.0

BEST_SCORE_KEY = "best_score"
