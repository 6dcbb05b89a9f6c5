import logging
from typing import Mapping, Optional

from esper import World

from ecs.components.goal import Goal, LevelGoals
from ecs.events.bus import EventBus, EVENT_BOARD_RESET, EVENT_GOAL_PROGRESS, EVENT_LEVEL_COMPLETE

logger = logging.getLogger(__name__)


class GoalSystem:
    """Tracks per-type clear requirements and decides when the level is complete.

    Logic:
      - report_match(type_id, count) decrements the first goal for that type
        while it still has tiles remaining, clamping at zero.
      - Reports are ignored once the level is complete, for empty ids and for
        non-positive counts.
      - The level completes when at least one goal exists and every goal has
        reached zero. Completion is latched and announced once.
      - A board reset replays the level, restoring every goal.
    """
    def __init__(self, world: World, event_bus: EventBus, goals: Optional[Mapping[str, int]] = None):
        self.world = world
        self.event_bus = event_bus
        self.entity = self.world.create_entity(
            LevelGoals(goals=[Goal(type_id=t, amount_required=int(n)) for t, n in (goals or {}).items()])
        )
        self.event_bus.subscribe(EVENT_BOARD_RESET, self.on_board_reset)

    def on_board_reset(self, sender, **kwargs):
        self.reset()

    def _level(self) -> LevelGoals:
        return self.world.component_for_entity(self.entity, LevelGoals)

    def report_match(self, type_id: str, count: int) -> None:
        level = self._level()
        if level.complete or not type_id or count <= 0:
            return
        for goal in level.goals:
            if goal.type_id != type_id:
                continue
            if goal.amount_remaining > 0:
                goal.amount_remaining = max(0, goal.amount_remaining - count)
                self.event_bus.emit(
                    EVENT_GOAL_PROGRESS,
                    type_id=type_id,
                    remaining=goal.amount_remaining,
                    required=goal.amount_required,
                )
                self._check_level_complete(level)
            break

    def is_level_complete(self) -> bool:
        return self._level().complete

    def remaining(self) -> dict:
        return self._level().remaining()

    def reset(self) -> None:
        """Restore every goal to its full requirement (replaying the level)."""
        level = self._level()
        for goal in level.goals:
            goal.amount_remaining = goal.amount_required
        level.complete = False

    def _check_level_complete(self, level: LevelGoals) -> None:
        if level.complete or not level.goals:
            return
        if any(not goal.done for goal in level.goals):
            return
        level.complete = True
        logger.info("Level complete: all %d goals reached", len(level.goals))
        self.event_bus.emit(EVENT_LEVEL_COMPLETE, goals=level.remaining())
