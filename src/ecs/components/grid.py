from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ecs.components.tile import Tile

Position = Tuple[int, int]

@dataclass(slots=True)
class Grid:
    """Fixed-size board storage of optional tiles.

    Coordinates are (x, y) with x growing rightwards and y growing upwards,
    so y == 0 is the bottom row that gravity collapses towards. Cells are
    stored row-major; an empty cell holds None.

    Out-of-range coordinates are a programming error and trip an assertion.
    """
    width: int
    height: int
    cells: List[Optional[Tile]] = field(default_factory=list)

    def __post_init__(self) -> None:
        assert self.width > 0 and self.height > 0, f"invalid grid size {self.width}x{self.height}"
        if not self.cells:
            self.cells = [None] * (self.width * self.height)
        assert len(self.cells) == self.width * self.height, "cell storage does not match grid size"

    def _index(self, x: int, y: int) -> int:
        assert 0 <= x < self.width and 0 <= y < self.height, (
            f"cell ({x},{y}) outside {self.width}x{self.height} grid"
        )
        return y * self.width + x

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Optional[Tile]:
        return self.cells[self._index(x, y)]

    def set(self, x: int, y: int, tile: Optional[Tile]) -> None:
        self.cells[self._index(x, y)] = tile

    def type_at(self, x: int, y: int) -> Optional[str]:
        tile = self.get(x, y)
        return tile.type_id if tile is not None else None

    def row(self, y: int) -> List[Optional[Tile]]:
        return [self.get(x, y) for x in range(self.width)]

    def column(self, x: int) -> List[Optional[Tile]]:
        """Column contents from bottom (y == 0) to top."""
        return [self.get(x, y) for y in range(self.height)]

    def positions(self) -> Iterator[Position]:
        for x in range(self.width):
            for y in range(self.height):
                yield (x, y)

    def occupied(self) -> Iterator[Tuple[Position, Tile]]:
        for pos in self.positions():
            tile = self.get(*pos)
            if tile is not None:
                yield pos, tile

    def empty_positions(self) -> List[Position]:
        return [pos for pos in self.positions() if self.get(*pos) is None]

    def clear(self) -> None:
        self.cells = [None] * (self.width * self.height)

    def type_rows(self) -> List[List[Optional[str]]]:
        """Type ids top row first, handy for printing and test fixtures."""
        return [
            [self.type_at(x, y) for x in range(self.width)]
            for y in reversed(range(self.height))
        ]

    @classmethod
    def from_type_rows(cls, rows: List[List[Optional[str]]]) -> "Grid":
        """Build a grid from type ids given top row first; None marks an empty cell."""
        assert rows and rows[0], "rows must be non-empty"
        height = len(rows)
        width = len(rows[0])
        grid = cls(width=width, height=height)
        for offset, row in enumerate(rows):
            assert len(row) == width, "rows must all have the same length"
            y = height - 1 - offset
            for x, type_id in enumerate(row):
                grid.set(x, y, Tile(type_id) if type_id is not None else None)
        return grid
