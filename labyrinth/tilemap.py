"""
The tile map: the authoritative grid state of one dungeon level.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np

from .event_system import Event, EventBus
from .geometry import Vector
from .tiles import Tile, TileType


class TileMap:
    """
    Sparse mapping from position to Tile over a square [0, size) grid.

    While a level is being assembled some cells may be missing; the final
    fill pass makes the map total. After that gameplay replaces individual
    tiles (doors, ground items) through the mutation helpers, which also
    announce the change on the optional event bus.
    """

    def __init__(
        self,
        size: int,
        tiles: Optional[Dict[Vector, Tile]] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.size: int = size
        self._tiles: Dict[Vector, Tile] = dict(tiles) if tiles else {}
        self.event_bus: Optional[EventBus] = event_bus

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, position: Vector) -> bool:
        return position in self._tiles

    def __iter__(self) -> Iterator[Vector]:
        return iter(self._tiles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TileMap):
            return NotImplemented
        return self.size == other.size and self._tiles == other._tiles

    def __repr__(self) -> str:
        return f"TileMap(size={self.size}, tiles={len(self._tiles)})"

    def _emit(self, event: Event, **kwargs: Any) -> None:
        if self.event_bus:
            self.event_bus.emit(event, **kwargs)

    def in_bounds(self, position: Vector) -> bool:
        return position.in_bounds(self.size, self.size)

    def tiles(self) -> Iterator[Tile]:
        return iter(self._tiles.values())

    def get_tile(self, position: Vector) -> Optional[Tile]:
        """Return the tile at position, or None if missing or out of bounds."""
        return self._tiles.get(position)

    def set_tile(self, position: Vector, tile: Tile) -> None:
        """
        Replace the tile at position.

        Raises:
            ValueError: If position is outside the map or the tile belongs
                to another position.
        """
        if not self.in_bounds(position):
            raise ValueError(f"{position} is outside a map of size {self.size}")
        if tile.position != position:
            raise ValueError(f"tile for {tile.position} cannot be stored at {position}")
        self._tiles[position] = tile
        self._emit(Event.TILE_CHANGED, position=position, tile=tile)

    def is_solid(self, position: Vector) -> bool:
        """Out of bounds and missing cells count as solid."""
        tile = self._tiles.get(position)
        return tile is None or tile.is_solid

    def is_passable(self, position: Vector) -> bool:
        return not self.is_solid(position)

    def fill(self, kind: TileType = TileType.ROCK) -> int:
        """
        Insert a tile of the given kind at every missing in-bounds cell.

        Bypasses the event bus: filling is part of building the level.

        Returns:
            Number of cells filled.
        """
        filled = 0
        for y in range(self.size):
            for x in range(self.size):
                position = Vector(x, y)
                if position not in self._tiles:
                    self._tiles[position] = Tile(position, kind)
                    filled += 1
        return filled

    def is_total(self) -> bool:
        return all(
            Vector(x, y) in self._tiles
            for y in range(self.size)
            for x in range(self.size)
        )

    def positions_of(self, kind: TileType) -> List[Vector]:
        """All positions holding a tile of this kind, sorted."""
        return sorted(
            position for position, tile in self._tiles.items() if tile.kind == kind
        )

    def count(self, kind: TileType) -> int:
        return sum(1 for tile in self._tiles.values() if tile.kind == kind)

    def open_door(self, position: Vector) -> bool:
        """Open a closed door. Returns False if there is no closed door here."""
        tile = self._tiles.get(position)
        if tile is None or tile.kind != TileType.DOOR_CLOSED:
            return False
        self.set_tile(position, tile.with_kind(TileType.DOOR_OPEN))
        self._emit(Event.DOOR_OPENED, position=position)
        return True

    def close_door(self, position: Vector) -> bool:
        """Close an open door that has nothing lying in it."""
        tile = self._tiles.get(position)
        if tile is None or tile.kind != TileType.DOOR_OPEN or tile.items:
            return False
        self.set_tile(position, tile.with_kind(TileType.DOOR_CLOSED))
        self._emit(Event.DOOR_CLOSED, position=position)
        return True

    def drop_item(self, position: Vector, item: Any) -> None:
        """
        Put an item on the ground.

        Raises:
            ValueError: If the cell is missing or solid.
        """
        tile = self._tiles.get(position)
        if tile is None or tile.is_solid:
            raise ValueError(f"cannot drop an item into solid cell {position}")
        self.set_tile(position, tile.with_item(item))
        self._emit(Event.ITEM_DROPPED, position=position, item=item)

    def pick_up_items(self, position: Vector) -> Tuple[Any, ...]:
        """Remove and return everything lying at position."""
        tile = self._tiles.get(position)
        if tile is None or not tile.items:
            return ()
        self.set_tile(position, tile.without_items())
        self._emit(Event.ITEMS_PICKED_UP, position=position, items=tile.items)
        return tile.items

    def copy(self) -> "TileMap":
        """A copy sharing the (immutable) tiles but not the event bus."""
        return TileMap(self.size, self._tiles)

    def to_array(self) -> np.ndarray:
        """
        Export the tile types as a (size, size) int array indexed [y, x].

        Missing cells export as ROCK.
        """
        grid = np.full((self.size, self.size), int(TileType.ROCK), dtype=int)
        for position, tile in self._tiles.items():
            grid[position.y, position.x] = int(tile.kind)
        return grid
