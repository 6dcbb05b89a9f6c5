"""Board state resource describing where the board sits in its move cycle."""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Tuple


class BoardPhase(Enum):
    """Phases of the board state machine.

    IDLE accepts moves. DETECT, CLEAR, COLLAPSE and REFILL make up the
    resolving loop. LEVEL_COMPLETE is terminal until the board is reset.
    """
    IDLE = auto()
    DETECT = auto()
    CLEAR = auto()
    COLLAPSE = auto()
    REFILL = auto()
    LEVEL_COMPLETE = auto()


@dataclass(slots=True)
class BoardState:
    """Singleton component shared by the board and cascade systems."""

    phase: BoardPhase = BoardPhase.IDLE
    busy: bool = False
    level_complete: bool = False
    cascade_depth: int = 0
    cap_reached: bool = False
    pending_matches: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def interactable(self) -> bool:
        return not self.busy and not self.level_complete

    @property
    def resolving(self) -> bool:
        return self.phase in (BoardPhase.DETECT, BoardPhase.CLEAR, BoardPhase.COLLAPSE, BoardPhase.REFILL)
