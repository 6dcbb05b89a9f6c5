import logging
from typing import Optional

from esper import World
from ecs.events.bus import (
    EventBus,
    EVENT_CASCADE_CAP_REACHED,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_MATCH_FOUND,
    EVENT_MOVE_APPLIED,
    EVENT_TILES_CLEARED,
    EVENT_TILES_COLLAPSED,
    EVENT_TILES_SPAWNED,
)
from ecs.config import BoardConfig
from ecs.components.board_state import BoardPhase, BoardState
from ecs.systems.board_ops import (
    clear_positions,
    collapse_columns,
    get_board_state,
    get_grid,
    get_tile_registry,
    refill_empty_cells,
    world_rng,
)
from ecs.systems.match import find_matches, tally_matches
from ecs.utils.goal_tracker import GoalTracker, NullGoalTracker
from ecs.world import world_config

logger = logging.getLogger(__name__)


class MatchResolutionSystem:
    """Drives detect -> report/clear -> collapse -> refill until the board settles.

    Each call to step() runs one phase and commits it before emitting the
    matching presentation event, so a caller may pause between steps to play
    animations. resolve() runs the loop to completion in one call; that is
    what happens on EVENT_MOVE_APPLIED when auto_resolve is set.

    The loop stops when detection finds nothing, when cascade_cap match sets
    have already been cleared (the board is then left as it is), or when the
    goal tracker reports level completion right after a clear. Only the
    first two reopen the board for input.
    """
    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        goal_tracker: Optional[GoalTracker] = None,
        *,
        auto_resolve: bool = True,
        config: Optional[BoardConfig] = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.goal_tracker: GoalTracker = goal_tracker or NullGoalTracker()
        self.auto_resolve = auto_resolve
        self.config = config or world_config(world)
        self.event_bus.subscribe(EVENT_MOVE_APPLIED, self.on_move_applied)

    def on_move_applied(self, sender, **kwargs):
        self.begin()
        if self.auto_resolve:
            self.resolve()

    def begin(self) -> None:
        state = get_board_state(self.world)
        state.busy = True
        state.phase = BoardPhase.DETECT
        state.cascade_depth = 0
        state.cap_reached = False
        state.pending_matches = []

    def resolve(self) -> int:
        """Run step() until resolution ends; returns the cascade depth reached."""
        while self.step():
            pass
        return get_board_state(self.world).cascade_depth

    def step(self) -> bool:
        """Advance one phase; returns True while there is more to resolve."""
        state = get_board_state(self.world)
        if state.phase is BoardPhase.DETECT:
            self._detect(state)
        elif state.phase is BoardPhase.CLEAR:
            self._clear(state)
        elif state.phase is BoardPhase.COLLAPSE:
            self._collapse(state)
        elif state.phase is BoardPhase.REFILL:
            self._refill(state)
        else:
            return False
        return state.resolving

    def _detect(self, state: BoardState) -> None:
        grid = get_grid(self.world)
        matches = find_matches(grid, get_tile_registry(self.world), min_run_length=self.config.min_run_length)
        if not matches:
            self._finish(state, capped=False)
            return
        if state.cascade_depth >= self.config.cascade_cap:
            logger.warning("Cascade cap of %d reached; leaving %d matched cells on the board",
                           self.config.cascade_cap, len(matches))
            state.cap_reached = True
            self.event_bus.emit(EVENT_CASCADE_CAP_REACHED, depth=state.cascade_depth)
            self._finish(state, capped=True)
            return
        state.cascade_depth += 1
        positions = list(matches)
        state.pending_matches = positions
        logger.debug("Cascade %d: %d matched cells", state.cascade_depth, len(positions))
        self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), depth=state.cascade_depth)
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=state.cascade_depth, positions=positions)
        state.phase = BoardPhase.CLEAR

    def _clear(self, state: BoardState) -> None:
        grid = get_grid(self.world)
        positions = state.pending_matches
        counts = tally_matches(grid, positions)
        for type_id, count in counts.items():
            if count > 0:
                self.goal_tracker.report_match(type_id, count)
        # Completion is sampled before collapse so a finished level keeps its holes.
        complete = self.goal_tracker.is_level_complete()
        removed = clear_positions(grid, positions)
        state.pending_matches = []
        self.event_bus.emit(
            EVENT_TILES_CLEARED,
            positions=[pos for pos, _ in removed],
            tiles=[tile for _, tile in removed],
            counts=counts,
        )
        if complete:
            state.level_complete = True
            state.phase = BoardPhase.LEVEL_COMPLETE
            logger.info("Level complete after cascade %d; board stays locked", state.cascade_depth)
            self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=state.cascade_depth, capped=False, level_complete=True)
            return
        state.phase = BoardPhase.COLLAPSE

    def _collapse(self, state: BoardState) -> None:
        moves = collapse_columns(get_grid(self.world))
        self.event_bus.emit(EVENT_TILES_COLLAPSED, moves=moves)
        state.phase = BoardPhase.REFILL

    def _refill(self, state: BoardState) -> None:
        spawns = refill_empty_cells(
            get_grid(self.world),
            get_tile_registry(self.world),
            world_rng(self.world),
            min_run_length=self.config.min_run_length,
        )
        self.event_bus.emit(EVENT_TILES_SPAWNED, spawns=spawns)
        state.phase = BoardPhase.DETECT

    def _finish(self, state: BoardState, *, capped: bool) -> None:
        if self.goal_tracker.is_level_complete():
            state.level_complete = True
            state.phase = BoardPhase.LEVEL_COMPLETE
        else:
            state.phase = BoardPhase.IDLE
            state.busy = False
        self.event_bus.emit(
            EVENT_CASCADE_COMPLETE,
            depth=state.cascade_depth,
            capped=capped,
            level_complete=state.level_complete,
        )
