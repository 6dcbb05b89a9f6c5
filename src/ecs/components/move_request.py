from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Direction(Enum):
    """Axis-aligned unit moves; values are (dx, dy) with y pointing up."""
    UP = (0, 1)
    DOWN = (0, -1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def horizontal(self) -> bool:
        return self.dy == 0

    @property
    def opposite(self) -> "Direction":
        return Direction((-self.dx, -self.dy))


@dataclass(frozen=True, slots=True)
class MoveRequest:
    """One player action: rotate the row (LEFT/RIGHT) or column (UP/DOWN) through start."""
    direction: Direction
    start: Tuple[int, int]

    @property
    def line(self) -> int:
        x, y = self.start
        return y if self.direction.horizontal else x
