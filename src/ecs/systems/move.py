from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from ecs.components.grid import Grid, Position
from ecs.components.move_request import Direction, MoveRequest
from ecs.components.tile import Tile
from ecs.components.tile_types import TileTypes
from ecs.systems.match import has_matches


@dataclass(slots=True)
class LineShift:
    source: Position
    target: Position
    tile: Tile


def _line_positions(grid: Grid, request: MoveRequest) -> List[Position]:
    x, y = request.start
    if request.direction.horizontal:
        return [(col, y) for col in range(grid.width)]
    return [(x, row) for row in range(grid.height)]


def rotate_line(grid: Grid, request: MoveRequest) -> List[LineShift]:
    """Rotate the row or column through request.start by one cell, wrapping around.

    RIGHT/UP move every tile one cell towards the positive axis and wrap the
    last tile to index 0; LEFT/DOWN are the mirror image.
    """
    positions = _line_positions(grid, request)
    tiles = [grid.get(*pos) for pos in positions]
    length = len(tiles)
    step = request.direction.dx if request.direction.horizontal else request.direction.dy
    shifts: List[LineShift] = []
    rotated: List[Optional[Tile]] = [None] * length
    for index, tile in enumerate(tiles):
        target_index = (index + step) % length
        rotated[target_index] = tile
        if tile is not None and target_index != index:
            shifts.append(LineShift(source=positions[index], target=positions[target_index], tile=tile))
    for pos, tile in zip(positions, rotated):
        grid.set(*pos, tile)
    return shifts


def classify_swipe(dx: float, dy: float, threshold: float) -> Optional[Direction]:
    """Map a raw drag delta to a direction; None when shorter than threshold.

    The larger-magnitude axis wins and ties go to the vertical axis.
    """
    if math.hypot(dx, dy) <= threshold:
        return None
    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.UP if dy > 0 else Direction.DOWN


def find_productive_moves(
    grid: Grid,
    registry: Optional[TileTypes] = None,
    *,
    min_run_length: int = 3,
) -> List[MoveRequest]:
    """Enumerate line rotations that would leave at least one match on the board."""
    moves: List[MoveRequest] = []
    candidates: List[MoveRequest] = []
    for y in range(grid.height):
        candidates.append(MoveRequest(Direction.LEFT, (0, y)))
        candidates.append(MoveRequest(Direction.RIGHT, (0, y)))
    for x in range(grid.width):
        candidates.append(MoveRequest(Direction.UP, (x, 0)))
        candidates.append(MoveRequest(Direction.DOWN, (x, 0)))
    for request in candidates:
        trial = Grid(width=grid.width, height=grid.height, cells=list(grid.cells))
        rotate_line(trial, request)
        if has_matches(trial, registry, min_run_length=min_run_length):
            moves.append(request)
    return moves
