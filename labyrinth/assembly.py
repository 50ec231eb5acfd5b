"""
Tile Map Assembler
==================

Turns placed rooms into a tile map:

1. Write every room cell, translated by the room's position.
2. Connect the rooms: a minimum spanning tree over the room centers decides
   which rooms to join, and A* carves a corridor between the closest pair of
   entrances for each joined pair. Corridors may run through empty cells and
   through other rooms' floors and entrances, never through walls.
3. Replace entrances no corridor reached with walls, so no door opens onto
   solid rock.
4. Fill every cell still missing with rock. This pass always runs, so the
   finished map covers the whole [0, size) x [0, size) grid.
"""

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .config import DungeonConfig
from .geometry import Vector, chebyshev
from .pathfinding import find_path, grid_neighbors
from .placement import DungeonRoom
from .templates import Entrance, EntranceKind
from .tilemap import TileMap
from .tiles import Tile, TileType

logger = logging.getLogger(__name__)

ENTRANCE_TILES: Dict[EntranceKind, TileType] = {
    EntranceKind.DOOR: TileType.DOOR_CLOSED,
    EntranceKind.NO_DOOR: TileType.FLOOR,
}


def room_tiles(dungeon_room: DungeonRoom) -> Iterator[Tile]:
    """Every tile of a placed room, in world coordinates."""
    room = dungeon_room.room
    for cell in room.floor:
        position = dungeon_room.to_world(cell)
        yield Tile(position, TileType.FLOOR)
    for segment in room.walls:
        for cell in segment:
            position = dungeon_room.to_world(cell)
            yield Tile(position, TileType.WALL)
    for cell in room.corners:
        position = dungeon_room.to_world(cell)
        yield Tile(position, TileType.CORNER)
    for entrance in dungeon_room.entrances():
        yield Tile(entrance.position, ENTRANCE_TILES[entrance.kind])


def plan_connections(dungeon_rooms: Sequence[DungeonRoom]) -> List[Tuple[int, int]]:
    """
    Choose which rooms to join with corridors.

    Kruskal's algorithm over the Chebyshev distance between room centers,
    ties broken by room index, so every room ends up in one tree.

    Returns:
        (i, j) index pairs with i < j, shortest edges first.
    """
    edges = sorted(
        (chebyshev(dungeon_rooms[i].center, dungeon_rooms[j].center), i, j)
        for i in range(len(dungeon_rooms))
        for j in range(i + 1, len(dungeon_rooms))
    )
    parent = list(range(len(dungeon_rooms)))

    def find(a: int) -> int:
        while parent[a] != a:
            parent[a] = parent[parent[a]]
            a = parent[a]
        return a

    tree: List[Tuple[int, int]] = []
    for _, i, j in edges:
        root_i, root_j = find(i), find(j)
        if root_i != root_j:
            parent[root_i] = root_j
            tree.append((i, j))
    return tree


def _closest_entrances(
    a: DungeonRoom, b: DungeonRoom
) -> Optional[Tuple[Entrance, Entrance]]:
    pairs = [(ea, eb) for ea in a.entrances() for eb in b.entrances()]
    if not pairs:
        return None
    return min(
        pairs,
        key=lambda pair: (
            chebyshev(pair[0].position, pair[1].position),
            pair[0].position,
            pair[1].position,
        ),
    )


def carve_corridors(
    tile_map: TileMap, dungeon_rooms: Sequence[DungeonRoom]
) -> Set[Vector]:
    """
    Carve corridors between rooms into a half-built tile map.

    Must run before the rock fill: missing cells are what corridors dig
    through.

    Returns:
        The world positions of every entrance a corridor starts at, ends at
        or passes through.
    """
    all_entrances = {
        entrance.position for room in dungeon_rooms for entrance in room.entrances()
    }

    def is_open(position: Vector) -> bool:
        if not tile_map.in_bounds(position):
            return False
        tile = tile_map.get_tile(position)
        return tile is None or not tile.is_solid

    neighbors_of = grid_neighbors(is_open)
    used: Set[Vector] = set()
    carved = 0

    for i, j in plan_connections(dungeon_rooms):
        endpoints = _closest_entrances(dungeon_rooms[i], dungeon_rooms[j])
        if endpoints is None:
            continue
        # A room's floor links all of its entrances, so if the closest pair
        # has no path no other pair has one either
        start, goal = endpoints[0].position, endpoints[1].position
        path = find_path(chebyshev, neighbors_of, start, goal)
        if path is None:
            logger.warning("no corridor between room %d and room %d", i, j)
            continue

        for cell in [start] + path:
            if cell in all_entrances:
                used.add(cell)
            if tile_map.get_tile(cell) is None:
                tile_map.set_tile(cell, Tile(cell, TileType.CORRIDOR))
        carved += 1

    logger.debug("carved %d corridors between %d rooms", carved, len(dungeon_rooms))
    return used


def seal_unused_entrances(
    tile_map: TileMap,
    dungeon_rooms: Sequence[DungeonRoom],
    used: Set[Vector],
) -> int:
    """
    Turn every entrance not in used into a wall.

    Returns:
        Number of entrances sealed.
    """
    sealed = 0
    for dungeon_room in dungeon_rooms:
        for entrance in dungeon_room.entrances():
            if entrance.position in used:
                continue
            tile_map.set_tile(entrance.position, Tile(entrance.position, TileType.WALL))
            sealed += 1
    return sealed


def find_floor_cell(
    tile_map: TileMap, dungeon_room: DungeonRoom, exclude: Sequence[Vector] = ()
) -> Optional[Vector]:
    """
    Find a FLOOR tile of the room, preferring cells near the room's center.

    Returns None if every floor cell is taken or excluded.
    """
    center = dungeon_room.center
    candidates = sorted(
        (chebyshev(cell, center), cell)
        for cell in dungeon_room.floor_cells()
        if cell not in exclude
    )
    for _, cell in candidates:
        tile = tile_map.get_tile(cell)
        if tile is not None and tile.kind == TileType.FLOOR:
            return cell
    return None


def place_stairs(
    tile_map: TileMap, dungeon_rooms: Sequence[DungeonRoom]
) -> Tuple[Optional[Vector], Optional[Vector]]:
    """
    Put up stairs in the first room and down stairs in the last one.

    Returns:
        (upstairs, downstairs) positions; downstairs is None when there is
        only one room, both are None when there are no rooms.
    """
    if not dungeon_rooms:
        return None, None

    upstairs = find_floor_cell(tile_map, dungeon_rooms[0])
    if upstairs is not None:
        tile_map.set_tile(upstairs, Tile(upstairs, TileType.STAIRS_UP))

    downstairs: Optional[Vector] = None
    if len(dungeon_rooms) > 1:
        downstairs = find_floor_cell(tile_map, dungeon_rooms[-1])
        if downstairs is not None:
            tile_map.set_tile(downstairs, Tile(downstairs, TileType.STAIRS_DOWN))

    return upstairs, downstairs


def assemble(dungeon_rooms: Sequence[DungeonRoom], config: DungeonConfig) -> TileMap:
    """
    Build the tile map for a set of placed rooms.

    Args:
        dungeon_rooms: Non-overlapping rooms, as returned by place_rooms
        config: Supplies the map size and the corridor settings

    Returns:
        A TileMap with a tile at every position in [0, size) x [0, size).
    """
    tile_map = TileMap(config.size)
    for dungeon_room in dungeon_rooms:
        for tile in room_tiles(dungeon_room):
            tile_map.set_tile(tile.position, tile)

    if config.connect_rooms:
        used = carve_corridors(tile_map, dungeon_rooms)
        if config.seal_unused_entrances:
            sealed = seal_unused_entrances(tile_map, dungeon_rooms, used)
            logger.debug("sealed %d unused entrances", sealed)

    tile_map.fill(TileType.ROCK)
    return tile_map
