"""Entry point for the TileShift sliding-line puzzle core.

Sets up the ECS world, event bus and board systems, then plays a headless
session: each turn picks a productive rotation when one exists (a random one
otherwise) until the level goals are met or the move budget runs out.
"""
import argparse
import logging
import random
import sys
from typing import Dict, List, Optional

from ecs.config import BoardConfig, BoardConfigError
from ecs.constants import DEFAULT_TILE_TYPES, GRID_HEIGHT, GRID_WIDTH
from ecs.events.bus import EventBus, EVENT_CASCADE_COMPLETE, EVENT_LEVEL_COMPLETE
from ecs.components.grid import Grid
from ecs.components.move_request import Direction
from ecs.systems.board import BoardSystem
from ecs.systems.board_ops import get_tile_registry
from ecs.systems.goal_system import GoalSystem
from ecs.systems.match_resolution import MatchResolutionSystem
from ecs.systems.move import find_productive_moves
from ecs.world import create_world

logger = logging.getLogger("tileshift")


def render_grid(grid: Grid) -> str:
    lines: List[str] = []
    for row in grid.type_rows():
        lines.append(" ".join(type_id[0].upper() if type_id else "." for type_id in row))
    return "\n".join(lines)


def parse_goals(values: Optional[List[str]]) -> Dict[str, int]:
    goals: Dict[str, int] = {}
    for value in values or []:
        type_id, _, amount = value.partition("=")
        if not type_id or not amount.isdigit():
            raise argparse.ArgumentTypeError(f"goal must look like TYPE=COUNT, got {value!r}")
        goals[type_id] = int(amount)
    return goals


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play a headless TileShift session.")
    parser.add_argument("--width", type=int, default=GRID_WIDTH)
    parser.add_argument("--height", type=int, default=GRID_HEIGHT)
    parser.add_argument("--types", nargs="+", default=list(DEFAULT_TILE_TYPES))
    parser.add_argument("--goal", action="append", metavar="TYPE=COUNT")
    parser.add_argument("--moves", type=int, default=30)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = BoardConfig(width=args.width, height=args.height, tile_types=args.types)
        goals = parse_goals(args.goal) or {config.tile_types[0]: 15}
    except (BoardConfigError, argparse.ArgumentTypeError) as exc:
        parser.error(str(exc))

    rng = random.Random(args.seed)
    event_bus = EventBus()
    world = create_world(event_bus, config, rng=rng)
    board_system = BoardSystem(world, event_bus)
    goal_system = GoalSystem(world, event_bus, goals)
    MatchResolutionSystem(world, event_bus, goal_system)

    cascades: List[int] = []
    event_bus.subscribe(EVENT_CASCADE_COMPLETE, lambda sender, **k: cascades.append(k.get("depth", 0)))
    event_bus.subscribe(EVENT_LEVEL_COMPLETE, lambda sender, **k: logger.info("Goals met: %s", k.get("goals")))

    print(render_grid(board_system.grid))
    played = 0
    while played < args.moves and board_system.is_interactable():
        options = find_productive_moves(
            board_system.grid,
            get_tile_registry(world),
            min_run_length=config.min_run_length,
        )
        if options:
            request = rng.choice(options)
            direction, start = request.direction, request.start
        else:
            direction = rng.choice(list(Direction))
            start = (rng.randrange(config.width), rng.randrange(config.height))
        board_system.submit_move(direction, start)
        played += 1
        logger.debug("Move %d: %s at %s -> %d cascades", played, direction.name, start, cascades[-1] if cascades else 0)

    print()
    print(render_grid(board_system.grid))
    print(f"moves={played} cascades={sum(cascades)} remaining={goal_system.remaining()} "
          f"complete={goal_system.is_level_complete()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
