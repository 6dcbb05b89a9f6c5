import random
import sys
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

@dataclass(slots=True)
class TileTypes:
    """Canonical tile type catalog stored on a single entity.

    This component lives alongside TileTypeRegistry (tag) and answers which
    ids exist, which ones may be spawned and which ones take part in matches.
    Neutral types can sit on the board but never match and never spawn.
    """
    types: List[str]
    spawnable: List[str] = field(default_factory=list)
    neutral: Set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.types = [sys.intern(name) for name in dict.fromkeys(self.types)]
        self.neutral = {name for name in self.neutral if name in self.types}
        if self.spawnable:
            self.spawnable = self._filter(self.spawnable)
        if not self.spawnable:
            self.spawnable = self._filter(self.types)

    def _filter(self, type_ids: Iterable[str]) -> List[str]:
        # Preserve order while dropping unknown, neutral and repeated ids.
        seen: set[str] = set()
        filtered: List[str] = []
        for name in type_ids:
            if name in self.types and name not in self.neutral and name not in seen:
                filtered.append(sys.intern(name))
                seen.add(name)
        return filtered

    def defined_types(self) -> List[str]:
        return list(self.types)

    def spawnable_types(self) -> List[str]:
        return list(self.spawnable)

    def is_matchable(self, type_id: Optional[str]) -> bool:
        return bool(type_id) and type_id in self.types and type_id not in self.neutral

    def spawn_candidates(self, exclude: Optional[str] = None) -> List[str]:
        if not exclude:
            return list(self.spawnable)
        return [name for name in self.spawnable if name != exclude]

    def pick(self, rng: random.Random, exclude: Optional[str] = None) -> Optional[str]:
        candidates = self.spawn_candidates(exclude)
        if not candidates:
            return None
        return rng.choice(candidates)

