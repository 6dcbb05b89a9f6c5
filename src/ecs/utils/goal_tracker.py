from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class GoalTracker(Protocol):
    """What the cascade resolver needs from level-goal bookkeeping."""

    def report_match(self, type_id: str, count: int) -> None: ...

    def is_level_complete(self) -> bool: ...


class NullGoalTracker:
    """Stand-in when no goal tracker is wired: reports vanish, the level never completes."""

    def report_match(self, type_id: str, count: int) -> None:
        return

    def is_level_complete(self) -> bool:
        return False
