"""
Tile types and the Tile value stored in a TileMap.
"""

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Any, FrozenSet, Tuple

from .geometry import Vector


class TileType(IntEnum):
    """
    Closed set of tile types.

    The integer values are what TileMap.to_array() exports.
    """

    ROCK = 0  # solid fill between rooms

    # Walkable
    FLOOR = 1
    CORRIDOR = 2

    # Room outline (non-walkable)
    WALL = 10
    CORNER = 11

    # Doors (walkable; stepping into a closed door opens it)
    DOOR_CLOSED = 20
    DOOR_OPEN = 21

    # Stairs (walkable)
    STAIRS_UP = 30
    STAIRS_DOWN = 31


SOLID_TILES: FrozenSet[TileType] = frozenset(
    {TileType.ROCK, TileType.WALL, TileType.CORNER}
)

DOOR_TILES: FrozenSet[TileType] = frozenset(
    {TileType.DOOR_CLOSED, TileType.DOOR_OPEN}
)


@dataclass(frozen=True)
class Tile:
    """
    One cell of a tile map.

    Tiles are never mutated. A state change (a door opening, an item landing
    on the ground) replaces the tile with a modified copy.
    """

    position: Vector
    kind: TileType
    # Ground container; the items themselves are opaque to the engine
    items: Tuple[Any, ...] = ()

    @property
    def is_solid(self) -> bool:
        return self.kind in SOLID_TILES

    @property
    def is_door(self) -> bool:
        return self.kind in DOOR_TILES

    def with_kind(self, kind: TileType) -> "Tile":
        return replace(self, kind=kind)

    def with_item(self, item: Any) -> "Tile":
        return replace(self, items=self.items + (item,))

    def without_items(self) -> "Tile":
        return replace(self, items=())
