from dataclasses import dataclass

@dataclass(frozen=True, slots=True, eq=False)
class Tile:
    """A single tile instance held by the Grid.

    Only the semantic type_id lives here; position is implied by the grid cell.
    Tiles are immutable and compared by identity, so two tiles of the same
    type are still distinct instances. Changing a tile's type means
    creating a new Tile.
    """
    type_id: str
