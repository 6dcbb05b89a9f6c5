from typing import Optional, Tuple

from esper import World
from ecs.events.bus import EventBus, EVENT_MOVE_REQUEST, EVENT_SWIPE
from ecs.components.move_request import Direction
from ecs.systems.board_ops import get_board_state
from ecs.systems.move import classify_swipe
from ecs.world import world_config

class InputSystem:
    """Turns abstract swipes into move requests.

    Mapping screen coordinates to a grid cell belongs to the caller; a swipe
    arrives here as the starting cell plus the raw drag delta. Drags no longer
    than the configured threshold are ignored, as are swipes while the board
    is not interactable.
    """
    def __init__(self, world: World, event_bus: EventBus, threshold: Optional[float] = None):
        self.world = world
        self.event_bus = event_bus
        self.threshold = world_config(world).swipe_threshold if threshold is None else threshold
        self.event_bus.subscribe(EVENT_SWIPE, self.on_swipe)

    def on_swipe(self, sender, **kwargs):
        start = kwargs.get('start')
        dx = kwargs.get('dx')
        dy = kwargs.get('dy')
        if start is None or dx is None or dy is None:
            return
        self.handle_swipe(start, dx, dy)

    def handle_swipe(self, start: Tuple[int, int], dx: float, dy: float) -> Optional[Direction]:
        if not get_board_state(self.world).interactable:
            return None
        direction = classify_swipe(dx, dy, self.threshold)
        if direction is None:
            return None
        self.event_bus.emit(EVENT_MOVE_REQUEST, direction=direction, start=tuple(start))
        return direction
