from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from ecs.components.grid import Grid, Position
from ecs.components.tile_types import TileTypes

# Ordered, deduplicated positions found in one scan; horizontal runs first.
MatchSet = Tuple[Position, ...]


def _scan_line(
    cells: Sequence[Tuple[Position, Optional[str]]],
    registry: Optional[TileTypes],
    min_run_length: int,
) -> List[List[Position]]:
    runs: List[List[Position]] = []
    index = 0
    count = len(cells)
    while index < count:
        _, type_id = cells[index]
        if type_id is None or (registry is not None and not registry.is_matchable(type_id)):
            index += 1
            continue
        end = index + 1
        while end < count and cells[end][1] == type_id:
            end += 1
        if end - index >= min_run_length:
            runs.append([pos for pos, _ in cells[index:end]])
        # Cells inside a confirmed or rejected run are not examined again.
        index = end
    return runs


def find_runs(grid: Grid, registry: Optional[TileTypes] = None, *, min_run_length: int = 3) -> List[List[Position]]:
    """Every horizontal then vertical run of at least min_run_length same-typed tiles."""
    runs: List[List[Position]] = []
    for y in range(grid.height):
        row = [((x, y), grid.type_at(x, y)) for x in range(grid.width)]
        runs.extend(_scan_line(row, registry, min_run_length))
    for x in range(grid.width):
        column = [((x, y), grid.type_at(x, y)) for y in range(grid.height)]
        runs.extend(_scan_line(column, registry, min_run_length))
    return runs


def find_matches(grid: Grid, registry: Optional[TileTypes] = None, *, min_run_length: int = 3) -> MatchSet:
    """Union of all runs, each cell listed once even where runs cross."""
    seen: set[Position] = set()
    ordered: List[Position] = []
    for run in find_runs(grid, registry, min_run_length=min_run_length):
        for pos in run:
            if pos in seen:
                continue
            seen.add(pos)
            ordered.append(pos)
    return tuple(ordered)


def has_matches(grid: Grid, registry: Optional[TileTypes] = None, *, min_run_length: int = 3) -> bool:
    return bool(find_runs(grid, registry, min_run_length=min_run_length))


def tally_matches(grid: Grid, positions: Sequence[Position]) -> Dict[str, int]:
    """Count matched tiles per type id, in first-seen order."""
    counts: Dict[str, int] = {}
    for x, y in positions:
        type_id = grid.type_at(x, y)
        if type_id is None:
            continue
        counts[type_id] = counts.get(type_id, 0) + 1
    return counts
