from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# INPUT
# ============================================================================
EVENT_SWIPE = "swipe"                      # payload: start=(x,y), dx=float, dy=float
EVENT_MOVE_REQUEST = "move_request"        # payload: direction=Direction, start=(x,y)


# ============================================================================
# MOVE LIFECYCLE
# ============================================================================
EVENT_MOVE_REJECTED = "move_rejected"      # payload: direction=Direction | None, start=(x,y), reason=str
EVENT_MOVE_APPLIED = "move_applied"        # payload: request=MoveRequest


# ============================================================================
# PRESENTATION (fire-and-forget, emitted after the logical step commits)
# ============================================================================
EVENT_TILES_ROTATED = "tiles_rotated"      # payload: direction=Direction, line=int, shifts=list[LineShift]
EVENT_MATCH_FOUND = "match_found"          # payload: positions=[(x,y),...], size=int, depth=int
EVENT_TILES_CLEARED = "tiles_cleared"      # payload: positions=[(x,y),...], tiles=list[Tile], counts=dict[str,int]
EVENT_TILES_COLLAPSED = "tiles_collapsed"  # payload: moves=list[GravityMove]
EVENT_TILES_SPAWNED = "tiles_spawned"      # payload: spawns=list[TileSpawn]


# ============================================================================
# CASCADE
# ============================================================================
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(x,y),...]
EVENT_CASCADE_CAP_REACHED = "cascade_cap_reached"  # payload: depth=int
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, capped=bool, level_complete=bool


# ============================================================================
# BOARD
# ============================================================================
EVENT_BOARD_READY = "board_ready"          # payload: attempts=int, clean=bool
EVENT_BOARD_RESET = "board_reset"          # payload: None


# ============================================================================
# GOALS
# ============================================================================
EVENT_GOAL_PROGRESS = "goal_progress"      # payload: type_id=str, remaining=int, required=int
EVENT_LEVEL_COMPLETE = "level_complete"    # payload: goals=dict[str,int]
