import random

from ecs.components.board_state import BoardPhase
from ecs.components.grid import Grid
from ecs.config import BoardConfig
from ecs.events.bus import (
    EventBus,
    EVENT_CASCADE_CAP_REACHED,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_MATCH_FOUND,
    EVENT_MOVE_REJECTED,
    EVENT_TILES_CLEARED,
    EVENT_TILES_COLLAPSED,
    EVENT_TILES_ROTATED,
    EVENT_TILES_SPAWNED,
)
from ecs.systems.board import BoardSystem
from ecs.systems.board_ops import get_board_state, get_tile_registry
from ecs.systems.goal_system import GoalSystem
from ecs.systems.match import has_matches
from ecs.systems.match_resolution import MatchResolutionSystem
from ecs.world import create_world

# Rotating the bottom row right turns [a a b c a] into [a a a b c].
PRIMED_ROWS = [
    ['d', 'e', 'a', 'b', 'c'],
    ['b', 'c', 'd', 'e', 'a'],
    ['e', 'a', 'b', 'c', 'd'],
    ['c', 'd', 'e', 'a', 'b'],
    ['a', 'a', 'b', 'c', 'a'],
]
TYPES = ['a', 'b', 'c', 'd', 'e']


def build(goals=None, *, seed=42, auto_resolve=True, **config_kwargs):
    bus = EventBus()
    config = BoardConfig(**{'tile_types': TYPES, **config_kwargs})
    world = create_world(bus, config, rng=random.Random(seed))
    board = BoardSystem(world, bus)
    goal_system = GoalSystem(world, bus, goals) if goals is not None else None
    resolver = MatchResolutionSystem(world, bus, goal_system, auto_resolve=auto_resolve)
    return bus, world, board, goal_system, resolver


def prime(board):
    board.grid.cells = Grid.from_type_rows(PRIMED_ROWS).cells
    assert not has_matches(board.grid), 'Primed board must start without matches'


def record(bus, *names):
    events = []
    for name in names:
        bus.subscribe(name, lambda sender, _name=name, **k: events.append((_name, k)))
    return events


def test_move_clears_collapses_refills_and_settles():
    bus, world, board, goals, _ = build({'a': 100})
    prime(board)
    events = record(
        bus,
        EVENT_TILES_ROTATED, EVENT_MATCH_FOUND, EVENT_CASCADE_STEP, EVENT_TILES_CLEARED,
        EVENT_TILES_COLLAPSED, EVENT_TILES_SPAWNED, EVENT_CASCADE_COMPLETE,
    )
    assert board.submit_move('right', (3, 0))
    names = [name for name, _ in events]
    assert names[:6] == [
        EVENT_TILES_ROTATED, EVENT_MATCH_FOUND, EVENT_CASCADE_STEP,
        EVENT_TILES_CLEARED, EVENT_TILES_COLLAPSED, EVENT_TILES_SPAWNED,
    ]
    assert names[-1] == EVENT_CASCADE_COMPLETE
    assert names.count(EVENT_CASCADE_COMPLETE) == 1
    first_clear = events[3][1]
    assert first_clear['positions'] == [(0, 0), (1, 0), (2, 0)]
    assert first_clear['counts'] == {'a': 3}
    assert [tile.type_id for tile in first_clear['tiles']] == ['a', 'a', 'a']
    complete = events[-1][1]
    assert complete['capped'] is False and complete['level_complete'] is False
    assert complete['depth'] >= 1
    assert goals.remaining()['a'] <= 97
    assert not board.grid.empty_positions()
    assert not has_matches(board.grid, get_tile_registry(world)), 'Board should settle without matches'
    state = get_board_state(world)
    assert state.phase is BoardPhase.IDLE
    assert board.is_interactable()


def test_collapse_moves_tiles_down_into_cleared_row():
    bus, world, board, _, _ = build()
    prime(board)
    above = [board.grid.get(x, 1) for x in range(3)]
    collapsed = {}
    bus.subscribe(EVENT_TILES_COLLAPSED, lambda s, **k: collapsed.setdefault('moves', k['moves']))
    board.submit_move('right', (0, 0))
    first = collapsed['moves']
    for x in range(3):
        assert any(m.tile is above[x] and m.source == (x, 1) and m.target == (x, 0) for m in first)


def test_cascade_stops_at_cap_and_restores_interactivity():
    bus, world, board, _, _ = build(
        width=3, height=3, tile_types=['a'], cascade_cap=5, max_initial_attempts=0,
    )
    steps = []
    capped = {}
    complete = {}
    bus.subscribe(EVENT_CASCADE_STEP, lambda s, **k: steps.append(k['depth']))
    bus.subscribe(EVENT_CASCADE_CAP_REACHED, lambda s, **k: capped.update(k))
    bus.subscribe(EVENT_CASCADE_COMPLETE, lambda s, **k: complete.update(k))
    assert board.submit_move('up', (1, 1))
    assert steps == [1, 2, 3, 4, 5]
    assert capped == {'depth': 5}
    assert complete == {'depth': 5, 'capped': True, 'level_complete': False}
    state = get_board_state(world)
    assert state.cap_reached
    assert state.phase is BoardPhase.IDLE
    assert board.is_interactable(), 'Reaching the cap must hand control back'
    assert has_matches(board.grid), 'Board is left in its last (still matched) state'


def test_level_completion_stops_before_collapse():
    bus, world, board, goals, _ = build({'a': 3})
    prime(board)
    events = record(bus, EVENT_TILES_CLEARED, EVENT_TILES_COLLAPSED, EVENT_TILES_SPAWNED, EVENT_CASCADE_COMPLETE)
    assert board.submit_move('right', (0, 0))
    names = [name for name, _ in events]
    assert names == [EVENT_TILES_CLEARED, EVENT_CASCADE_COMPLETE]
    assert events[-1][1] == {'depth': 1, 'capped': False, 'level_complete': True}
    assert goals.is_level_complete()
    # Cleared cells stay empty and nothing above them fell.
    assert [board.grid.get(x, 0) for x in range(3)] == [None, None, None]
    assert [board.grid.type_at(x, 1) for x in range(5)] == ['c', 'd', 'e', 'a', 'b']
    state = get_board_state(world)
    assert state.level_complete and state.busy
    assert state.phase is BoardPhase.LEVEL_COMPLETE
    assert not board.is_interactable()


def test_moves_rejected_after_level_complete():
    bus, world, board, _, _ = build({'a': 3})
    prime(board)
    board.submit_move('right', (0, 0))
    rejected = {}
    bus.subscribe(EVENT_MOVE_REJECTED, lambda s, **k: rejected.update(k))
    before = list(board.grid.cells)
    assert not board.submit_move('left', (0, 2))
    assert rejected['reason'] == 'level_complete'
    assert board.grid.cells == before


def test_without_goal_tracker_cascades_never_short_circuit():
    bus, world, board, _, _ = build(None)
    prime(board)
    complete = {}
    bus.subscribe(EVENT_CASCADE_COMPLETE, lambda s, **k: complete.update(k))
    board.submit_move('right', (0, 0))
    assert complete['level_complete'] is False
    assert not board.grid.empty_positions()
    assert board.is_interactable()


def test_step_driven_resolution_commits_one_phase_at_a_time():
    bus, world, board, goals, resolver = build({'a': 100}, auto_resolve=False)
    prime(board)
    state = get_board_state(world)
    assert board.submit_move('right', (0, 0))
    assert state.phase is BoardPhase.DETECT and state.busy
    assert [board.grid.type_at(x, 0) for x in range(3)] == ['a', 'a', 'a']

    assert resolver.step() is True
    assert state.phase is BoardPhase.CLEAR
    assert state.pending_matches == [(0, 0), (1, 0), (2, 0)]
    assert board.grid.type_at(0, 0) == 'a', 'Detection alone must not touch the grid'

    assert resolver.step() is True
    assert state.phase is BoardPhase.COLLAPSE
    assert [board.grid.get(x, 0) for x in range(3)] == [None, None, None]
    assert goals.remaining()['a'] == 97

    assert resolver.step() is True
    assert state.phase is BoardPhase.REFILL
    assert [board.grid.get(x, 4) for x in range(3)] == [None, None, None]
    assert board.grid.type_at(0, 0) == 'c'

    assert resolver.step() is True
    assert state.phase is BoardPhase.DETECT
    assert not board.grid.empty_positions()

    resolver.resolve()
    assert state.phase is BoardPhase.IDLE
    assert board.is_interactable()
    assert resolver.step() is False, 'Stepping an idle board does nothing'


def test_moves_are_dropped_while_resolving():
    bus, world, board, _, resolver = build(auto_resolve=False)
    prime(board)
    rejected = []
    bus.subscribe(EVENT_MOVE_REJECTED, lambda s, **k: rejected.append(k['reason']))
    assert board.submit_move('right', (0, 0))
    snapshot = list(board.grid.cells)
    assert not board.submit_move('up', (4, 4))
    assert rejected == ['busy']
    assert board.grid.cells == snapshot, 'A rejected move must not be queued or applied'
    resolver.resolve()
    assert board.submit_move('up', (4, 4))


def test_move_without_matches_returns_control_immediately():
    bus, world, board, _, _ = build()
    prime(board)
    complete = {}
    bus.subscribe(EVENT_CASCADE_COMPLETE, lambda s, **k: complete.update(k))
    assert board.submit_move('left', (0, 2))
    assert complete == {'depth': 0, 'capped': False, 'level_complete': False}
    assert board.is_interactable()
