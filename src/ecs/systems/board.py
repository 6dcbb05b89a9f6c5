import logging
from typing import Optional, Tuple, Union

from esper import World
from ecs.events.bus import (
    EventBus,
    EVENT_BOARD_READY,
    EVENT_BOARD_RESET,
    EVENT_MOVE_APPLIED,
    EVENT_MOVE_REJECTED,
    EVENT_MOVE_REQUEST,
    EVENT_TILES_ROTATED,
)
from ecs.config import BoardConfig
from ecs.components.board_state import BoardPhase, BoardState
from ecs.components.grid import Grid
from ecs.components.move_request import Direction, MoveRequest
from ecs.systems.board_ops import get_board_state, get_tile_registry, world_rng
from ecs.systems.match import has_matches
from ecs.systems.move import rotate_line
from ecs.systems.spawn import spawn_tile_at
from ecs.world import world_config

logger = logging.getLogger(__name__)


class BoardSystem:
    """Owns the grid entity, builds match-free boards and accepts moves.

    A move is accepted only while the board is interactable. Accepting a move
    marks the board busy, rotates the line and emits EVENT_MOVE_APPLIED; the
    cascade resolver takes it from there and releases the busy flag.
    """
    def __init__(self, world: World, event_bus: EventBus, config: Optional[BoardConfig] = None):
        self.world = world
        self.event_bus = event_bus
        self.config = config or world_config(world)
        self.board_entity = self.world.create_entity(Grid(width=self.config.width, height=self.config.height))
        self.event_bus.subscribe(EVENT_MOVE_REQUEST, self.on_move_request)
        self.initialize_board()

    @property
    def grid(self) -> Grid:
        return self.world.component_for_entity(self.board_entity, Grid)

    @property
    def state(self) -> BoardState:
        return get_board_state(self.world)

    def initialize_board(self) -> bool:
        """Fill every cell, retry until no match remains, then open the board for moves."""
        grid = self.grid
        grid.clear()
        self._fill(grid)
        attempts, clean = self.ensure_no_initial_matches()
        state = self.state
        state.phase = BoardPhase.IDLE
        state.busy = False
        state.cascade_depth = 0
        state.cap_reached = False
        state.pending_matches = []
        logger.info("Board %dx%d ready after %d respawns", grid.width, grid.height, attempts)
        self.event_bus.emit(EVENT_BOARD_READY, attempts=attempts, clean=clean)
        return clean

    def ensure_no_initial_matches(self) -> Tuple[int, bool]:
        """Respawn the whole board while it contains a match, up to max_initial_attempts times."""
        grid = self.grid
        registry = get_tile_registry(self.world)
        min_run = self.config.min_run_length
        attempts = 0
        while has_matches(grid, registry, min_run_length=min_run) and attempts < self.config.max_initial_attempts:
            attempts += 1
            grid.clear()
            self._fill(grid)
        clean = not has_matches(grid, registry, min_run_length=min_run)
        if not clean:
            logger.warning("Initial board still contains matches after %d attempts", attempts)
        return attempts, clean

    def _fill(self, grid: Grid) -> None:
        registry = get_tile_registry(self.world)
        rng = world_rng(self.world)
        for x in range(grid.width):
            for y in range(grid.height):
                grid.set(x, y, spawn_tile_at(
                    grid, x, y, registry, rng,
                    min_run_length=self.config.min_run_length,
                ))

    def is_interactable(self) -> bool:
        return self.state.interactable

    def on_move_request(self, sender, **kwargs):
        direction = kwargs.get('direction')
        start = kwargs.get('start')
        if direction is None or start is None:
            return
        self.submit_move(direction, start)

    def submit_move(self, direction: Union[Direction, str], start: Tuple[int, int]) -> bool:
        """Rotate the line through start if the board accepts input; returns acceptance."""
        direction = _parse_direction(direction)
        state = self.state
        reason = None
        if state.level_complete:
            reason = 'level_complete'
        elif state.busy:
            reason = 'busy'
        elif direction is None:
            reason = 'bad_direction'
        elif not self.grid.in_bounds(*start):
            reason = 'out_of_bounds'
        if reason is not None:
            logger.debug("Move %s from %s rejected: %s", direction, start, reason)
            self.event_bus.emit(EVENT_MOVE_REJECTED, direction=direction, start=start, reason=reason)
            return False
        state.busy = True
        request = MoveRequest(direction=direction, start=tuple(start))
        shifts = rotate_line(self.grid, request)
        self.event_bus.emit(EVENT_TILES_ROTATED, direction=direction, line=request.line, shifts=shifts)
        self.event_bus.emit(EVENT_MOVE_APPLIED, request=request)
        return True

    def reset_board(self) -> bool:
        """Rebuild the board from scratch and reopen it; refused while a cascade is resolving."""
        state = self.state
        if state.resolving:
            logger.warning("Board reset refused while resolving (phase %s)", state.phase.name)
            return False
        state.level_complete = False
        # BOARD_RESET precedes BOARD_READY so listeners of the latter see restored goals.
        self.event_bus.emit(EVENT_BOARD_RESET)
        self.initialize_board()
        return True


def _parse_direction(direction) -> Optional[Direction]:
    """Accept a Direction or its case-insensitive name; None for anything else."""
    if isinstance(direction, Direction):
        return direction
    if isinstance(direction, str):
        return Direction.__members__.get(direction.upper())
    return None
