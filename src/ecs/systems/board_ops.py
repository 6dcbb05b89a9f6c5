from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from esper import World

from ecs.components.board_state import BoardState
from ecs.components.grid import Grid, Position
from ecs.components.tile import Tile
from ecs.components.tile_type_registry import TileTypeRegistry
from ecs.components.tile_types import TileTypes
from ecs.systems.spawn import spawn_tile_at


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    tile: Tile


@dataclass(slots=True)
class TileSpawn:
    origin: Position
    target: Position
    tile: Tile


def get_tile_registry(world: World) -> TileTypes:
    for entity, _ in world.get_component(TileTypeRegistry):
        return world.component_for_entity(entity, TileTypes)
    raise RuntimeError("TileTypes definitions not found")


def get_grid(world: World) -> Grid:
    for _, grid in world.get_component(Grid):
        return grid
    raise RuntimeError("Grid component not found")


def get_board_state(world: World) -> BoardState:
    """Return the shared BoardState component, creating it if absent."""
    existing = list(world.get_component(BoardState))
    if existing:
        return existing[0][1]
    state = BoardState()
    world.create_entity(state)
    return state


def world_rng(world: World) -> random.Random:
    candidate = getattr(world, "random", None)
    if isinstance(candidate, random.Random):
        return candidate
    rng = random.Random()
    setattr(world, "random", rng)
    return rng


def clear_positions(grid: Grid, positions: Sequence[Position]) -> List[Tuple[Position, Tile]]:
    """Empty every occupied cell in positions and return what was removed."""
    removed: List[Tuple[Position, Tile]] = []
    for x, y in positions:
        tile = grid.get(x, y)
        if tile is None:
            continue
        grid.set(x, y, None)
        removed.append(((x, y), tile))
    return removed


def compute_gravity_moves(grid: Grid) -> List[GravityMove]:
    """Stable per-column compaction towards y == 0."""
    moves: List[GravityMove] = []
    for x in range(grid.width):
        target_y = 0
        for y in range(grid.height):
            tile = grid.get(x, y)
            if tile is None:
                continue
            if y != target_y:
                moves.append(GravityMove(source=(x, y), target=(x, target_y), tile=tile))
            target_y += 1
    return moves


def apply_gravity_moves(grid: Grid, moves: Sequence[GravityMove]) -> None:
    # Moves are produced bottom-up per column, so every target is already empty
    # or was vacated by an earlier move.
    for move in moves:
        grid.set(*move.source, None)
    for move in moves:
        grid.set(*move.target, move.tile)


def collapse_columns(grid: Grid) -> List[GravityMove]:
    moves = compute_gravity_moves(grid)
    if moves:
        apply_gravity_moves(grid, moves)
    return moves


def refill_empty_cells(
    grid: Grid,
    registry: TileTypes,
    rng: random.Random,
    *,
    min_run_length: int = 3,
    exclude: Optional[str] = None,
) -> List[TileSpawn]:
    """Fill empties column by column, bottom to top, using the spawn policy."""
    spawns: List[TileSpawn] = []
    for x in range(grid.width):
        spawn_count = 0
        for y in range(grid.height):
            if grid.get(x, y) is not None:
                continue
            tile = spawn_tile_at(
                grid, x, y, registry, rng,
                exclude=exclude,
                min_run_length=min_run_length,
            )
            grid.set(x, y, tile)
            spawns.append(TileSpawn(origin=(x, grid.height + spawn_count), target=(x, y), tile=tile))
            spawn_count += 1
    return spawns
