from dataclasses import dataclass

@dataclass(slots=True)
class TileTypeRegistry:
    """Empty tag component marking the single entity that owns the tile catalog.

    The same entity also carries the TileTypes component consulted by the
    match detector and the spawn policy.
    """
    pass
