"""
Dungeon Generation
==================

One level is generated in four steps, each threading the RNG state along:

1. Generate config.room_count rooms: pick a shape, pick a dimension, build
   the template.
2. Place each room at a random position, rejecting candidates that overlap
   rooms placed earlier. Rooms that never fit are dropped.
3. Assemble the tile map: room cells, corridors between the rooms, unused
   entrances walled up, rock everywhere else.
4. Put up stairs in the first room and down stairs in the last.

The same config and seed always produce the same tile map and the same
returned RNG state.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .assembly import assemble, place_stairs
from .config import DungeonConfig
from .event_system import Event, EventBus
from .geometry import Vector
from .placement import DungeonRoom, place_rooms
from .rng import RngState, as_rng_state
from .rooms import generate_rooms
from .tilemap import TileMap
from .world import Hero, World

logger = logging.getLogger(__name__)

Seed = Union[int, RngState]


@dataclass
class Level:
    """A generated level and what is known about how it was laid out."""

    tile_map: TileMap
    rooms: List[DungeonRoom] = field(default_factory=list)
    requested_rooms: int = 0
    upstairs: Optional[Vector] = None
    downstairs: Optional[Vector] = None

    def find_room_at(self, position: Vector) -> Optional[int]:
        """Index of the room whose box contains position, if any."""
        for index, dungeon_room in enumerate(self.rooms):
            if dungeon_room.contains(position):
                return index
        return None


def generate_level(config: DungeonConfig, seed: Seed) -> Tuple[Level, RngState]:
    """
    Generate a level.

    Args:
        config: Generation settings, validated before anything is drawn
        seed: An int seed or the RngState to continue from

    Returns:
        (level, next_state)

    Raises:
        ConfigurationError: If the configuration cannot produce valid rooms.
    """
    config.validate()
    rng = as_rng_state(seed)

    rooms, rng = generate_rooms(config, rng)
    dungeon_rooms, rng = place_rooms(rooms, config, rng)
    tile_map = assemble(dungeon_rooms, config)

    upstairs: Optional[Vector] = None
    downstairs: Optional[Vector] = None
    if config.place_stairs:
        upstairs, downstairs = place_stairs(tile_map, dungeon_rooms)

    logger.info(
        "generated %dx%d level with %d of %d rooms",
        config.size,
        config.size,
        len(dungeon_rooms),
        config.room_count,
    )
    level = Level(
        tile_map=tile_map,
        rooms=dungeon_rooms,
        requested_rooms=config.room_count,
        upstairs=upstairs,
        downstairs=downstairs,
    )
    return level, rng


def generate(config: DungeonConfig, seed: Seed) -> Tuple[TileMap, RngState]:
    """One-shot synthesis: just the tile map and the advanced RNG state."""
    level, rng = generate_level(config, seed)
    return level.tile_map, rng


def create_world(
    config: DungeonConfig,
    seed: Seed,
    event_bus: Optional[EventBus] = None,
) -> Tuple[World, Level, RngState]:
    """
    Factory for a playable world on a freshly generated level.

    The hero starts on the up stairs, or on the first floor cell of the first
    room when stairs are disabled. With no rooms at all there is no hero.
    """
    level, rng = generate_level(config, seed)

    start = level.upstairs
    if start is None and level.rooms:
        start = min(level.rooms[0].floor_cells())
    hero = Hero(position=start) if start is not None else None

    world = World(level.tile_map, hero=hero, event_bus=event_bus)
    if event_bus:
        event_bus.emit(
            Event.LEVEL_GENERATED,
            room_count=len(level.rooms),
            requested_rooms=level.requested_rooms,
        )
    return world, level, rng
