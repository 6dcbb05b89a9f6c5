"""Constrained-random tile generation.

Fill order is column by column, bottom to top, so when a cell is filled the
only settled neighbours are the ones to its left and below it. A candidate
type is rejected when it would complete a run with those neighbours.
"""
from __future__ import annotations

import random
from typing import Optional

from ecs.components.grid import Grid
from ecs.components.tile import Tile
from ecs.components.tile_types import TileTypes
from ecs.config import BoardConfigError


def creates_immediate_match(grid: Grid, x: int, y: int, type_id: str, *, min_run_length: int = 3) -> bool:
    """Return True if type_id at (x, y) would finish a run to the left or below."""
    needed = min_run_length - 1
    if x >= needed and all(grid.type_at(x - step, y) == type_id for step in range(1, needed + 1)):
        return True
    if y >= needed and all(grid.type_at(x, y - step) == type_id for step in range(1, needed + 1)):
        return True
    return False


def choose_spawn_type(
    grid: Grid,
    x: int,
    y: int,
    registry: TileTypes,
    rng: random.Random,
    *,
    exclude: Optional[str] = None,
    ensure_no_match: bool = True,
    min_run_length: int = 3,
) -> str:
    candidates = registry.spawn_candidates(exclude)
    if not candidates:
        raise BoardConfigError("tile catalog has no spawnable tile types")
    if ensure_no_match:
        safe = [
            type_id for type_id in candidates
            if not creates_immediate_match(grid, x, y, type_id, min_run_length=min_run_length)
        ]
        if safe:
            return rng.choice(safe)
    # Unconstrained, or nothing is safe: accept a match rather than leave the cell empty.
    return registry.pick(rng, exclude)


def spawn_tile_at(
    grid: Grid,
    x: int,
    y: int,
    registry: TileTypes,
    rng: random.Random,
    *,
    exclude: Optional[str] = None,
    ensure_no_match: bool = True,
    min_run_length: int = 3,
) -> Tile:
    type_id = choose_spawn_type(
        grid, x, y, registry, rng,
        exclude=exclude,
        ensure_no_match=ensure_no_match,
        min_run_length=min_run_length,
    )
    return Tile(type_id)
