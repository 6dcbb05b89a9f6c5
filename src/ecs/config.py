"""Board configuration supplied at world creation.

Every field has a default from ``ecs.constants``; validation happens in
``__post_init__`` so an invalid configuration never reaches the world.
"""
from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field, fields
from numbers import Real
from typing import Any, Mapping, Sequence, Tuple

from ecs.constants import (
    DEFAULT_TILE_TYPES,
    GRID_HEIGHT,
    GRID_WIDTH,
    MAX_CASCADES,
    MAX_INITIAL_ATTEMPTS,
    MIN_RUN_LENGTH,
    SWIPE_THRESHOLD,
)


class BoardConfigError(ValueError):
    """Raised when the board cannot start from the given configuration."""


@dataclass(slots=True)
class BoardConfig:
    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT
    tile_types: Sequence[str] = DEFAULT_TILE_TYPES
    cascade_cap: int = MAX_CASCADES
    min_run_length: int = MIN_RUN_LENGTH
    neutral_types: Sequence[str] = field(default_factory=tuple)
    swipe_threshold: float = SWIPE_THRESHOLD
    max_initial_attempts: int = MAX_INITIAL_ATTEMPTS

    def __post_init__(self) -> None:
        _require_int(self.width, "width", 1)
        _require_int(self.height, "height", 1)
        self.tile_types = _normalize_ids(self.tile_types, "tile_types")
        if not self.tile_types:
            raise BoardConfigError("tile_types must contain at least one tile type")
        self.neutral_types = _normalize_ids(self.neutral_types, "neutral_types")
        unknown = [name for name in self.neutral_types if name not in self.tile_types]
        if unknown:
            raise BoardConfigError(f"neutral_types not present in tile_types: {unknown}")
        if all(name in self.neutral_types for name in self.tile_types):
            raise BoardConfigError("tile_types has no matchable type; every type is neutral")
        _require_int(self.cascade_cap, "cascade_cap", 1)
        _require_int(self.min_run_length, "min_run_length", MIN_RUN_LENGTH)
        _require_int(self.max_initial_attempts, "max_initial_attempts", 0)
        if (
            isinstance(self.swipe_threshold, bool)
            or not isinstance(self.swipe_threshold, Real)
            or math.isnan(self.swipe_threshold)
            or self.swipe_threshold < 0
        ):
            raise BoardConfigError(f"swipe_threshold must be a number >= 0, got {self.swipe_threshold!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BoardConfig":
        known = {f.name for f in fields(cls)}
        extra = sorted(set(data) - known)
        if extra:
            raise BoardConfigError(f"unknown configuration keys: {extra}")
        return cls(**dict(data))

    @property
    def spawnable_types(self) -> Tuple[str, ...]:
        return tuple(name for name in self.tile_types if name not in self.neutral_types)


def _require_int(value: Any, label: str, minimum: int) -> None:
    # bool is an int subclass; True is not a width.
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise BoardConfigError(f"{label} must be an integer >= {minimum}, got {value!r}")


def _normalize_ids(values: Sequence[str], label: str) -> Tuple[str, ...]:
    if isinstance(values, str):
        raise BoardConfigError(f"{label} must be a sequence of ids, not a single string")
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if not isinstance(value, str) or not value.strip():
            raise BoardConfigError(f"{label} contains an invalid tile type id: {value!r}")
        name = sys.intern(value)
        if name in seen:
            continue
        seen.add(name)
        result.append(name)
    return tuple(result)
