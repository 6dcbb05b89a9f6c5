GRID_WIDTH = 5
GRID_HEIGHT = 5

# Opaque tile type identifiers used when no catalog is supplied.
DEFAULT_TILE_TYPES = ('red', 'green', 'blue', 'yellow', 'purple')

# Hard limit on clear/collapse/refill iterations for a single move.
MAX_CASCADES = 50
# Shortest horizontal or vertical run that counts as a match.
MIN_RUN_LENGTH = 3

# Minimum swipe length (in input units) before a drag is read as a move.
SWIPE_THRESHOLD = 30.0

# Full-board respawn attempts when the first fill still contains matches.
MAX_INITIAL_ATTEMPTS = 50
