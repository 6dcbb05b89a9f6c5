from dataclasses import dataclass, field
from typing import Dict, List

@dataclass(slots=True)
class Goal:
    """Clear `amount_required` tiles of `type_id`; remaining never drops below zero."""
    type_id: str
    amount_required: int
    amount_remaining: int = 0

    def __post_init__(self) -> None:
        if self.amount_required < 0:
            self.amount_required = 0
        self.amount_remaining = self.amount_required

    @property
    def done(self) -> bool:
        return self.amount_remaining <= 0


@dataclass(slots=True)
class LevelGoals:
    """Goal list for the current level plus its completion latch."""
    goals: List[Goal] = field(default_factory=list)
    complete: bool = False

    def remaining(self) -> Dict[str, int]:
        return {goal.type_id: goal.amount_remaining for goal in self.goals}
