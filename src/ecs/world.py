import random

from esper import World
from .events.bus import EventBus
from ecs.config import BoardConfig
from ecs.components.board_state import BoardState
from ecs.components.tile_type_registry import TileTypeRegistry
from ecs.components.tile_types import TileTypes


def create_world(
    event_bus: EventBus,
    config: BoardConfig | None = None,
    *,
    rng: random.Random | None = None,
) -> World:
    """Create the ECS world holding the tile catalog and the board state singleton.

    The grid itself is created by BoardSystem. The configuration is validated
    before any entity exists, so a bad config leaves nothing half-built.
    """
    config = config or BoardConfig()
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "config", config)
    setattr(world, "event_bus", event_bus)

    world.create_entity(
        TileTypeRegistry(),
        TileTypes(
            types=list(config.tile_types),
            spawnable=list(config.spawnable_types),
            neutral=set(config.neutral_types),
        ),
    )
    world.create_entity(BoardState())
    return world


def world_config(world: World) -> BoardConfig:
    config = getattr(world, "config", None)
    if isinstance(config, BoardConfig):
        return config
    config = BoardConfig()
    setattr(world, "config", config)
    return config
