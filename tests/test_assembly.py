"""Tests for turning placed rooms into a tile map."""

import logging

import pytest

from labyrinth.assembly import (
    assemble,
    carve_corridors,
    place_stairs,
    plan_connections,
    room_tiles,
)
from labyrinth.config import DungeonConfig
from labyrinth.geometry import Vector
from labyrinth.pathfinding import find_grid_path, flood_fill, grid_neighbors
from labyrinth.placement import DungeonRoom
from labyrinth.templates import RoomShape, build_room
from labyrinth.tilemap import TileMap
from labyrinth.tiles import TileType


def rect_room(x: int, y: int, dimension: int = 5) -> DungeonRoom:
    return DungeonRoom(build_room(RoomShape.RECTANGULAR, dimension), Vector(x, y))


class TestRoomTiles:
    """Room cells become tiles."""

    def test_rectangular_room_tiles(self):
        tiles = {tile.position: tile.kind for tile in room_tiles(rect_room(10, 10))}

        assert len(tiles) == 25
        assert tiles[Vector(12, 12)] == TileType.FLOOR
        assert tiles[Vector(10, 10)] == TileType.CORNER
        assert tiles[Vector(11, 10)] == TileType.WALL
        assert tiles[Vector(12, 10)] == TileType.DOOR_CLOSED

    def test_open_entrances_become_floor(self):
        dungeon_room = DungeonRoom(build_room(RoomShape.CROSS, 7), Vector(0, 0))
        tiles = {tile.position: tile.kind for tile in room_tiles(dungeon_room)}
        for entrance in dungeon_room.entrances():
            assert tiles[entrance.position] == TileType.FLOOR


class TestPlanConnections:
    """Minimum spanning tree over room centers."""

    def test_no_rooms(self):
        assert plan_connections([]) == []

    def test_connects_every_room(self):
        rooms = [rect_room(0, 0), rect_room(20, 0), rect_room(0, 20), rect_room(40, 40)]
        tree = plan_connections(rooms)

        assert len(tree) == len(rooms) - 1
        reached = flood_fill(
            0,
            lambda i: [b for a, b in tree if a == i] + [a for a, b in tree if b == i],
        )
        assert reached == {0, 1, 2, 3}

    def test_prefers_short_edges(self):
        rooms = [rect_room(0, 0), rect_room(10, 0), rect_room(40, 0)]
        assert plan_connections(rooms) == [(0, 1), (1, 2)]


class TestAssemble:
    """Full tile map assembly."""

    def test_map_is_total_without_rooms(self):
        tile_map = assemble([], DungeonConfig(size=10))
        assert tile_map.is_total()
        assert tile_map.count(TileType.ROCK) == 100

    def test_unconnected_rooms_keep_their_doors(self):
        rooms = [rect_room(2, 2), rect_room(20, 2)]
        tile_map = assemble(rooms, DungeonConfig(size=30, connect_rooms=False))

        assert tile_map.is_total()
        assert tile_map.count(TileType.DOOR_CLOSED) == 8
        assert tile_map.count(TileType.CORRIDOR) == 0
        assert tile_map.count(TileType.ROCK) == 30 * 30 - 2 * 25

    def test_corridor_joins_the_facing_doors(self):
        """Two rooms side by side are joined between their east and west doors."""
        rooms = [rect_room(2, 2), rect_room(20, 2)]
        tile_map = assemble(rooms, DungeonConfig(size=30))

        assert tile_map.get_tile(Vector(6, 4)).kind == TileType.DOOR_CLOSED
        assert tile_map.get_tile(Vector(20, 4)).kind == TileType.DOOR_CLOSED
        for x in range(7, 20):
            assert tile_map.get_tile(Vector(x, 4)).kind == TileType.CORRIDOR
        assert tile_map.count(TileType.CORRIDOR) == 13

    def test_unused_entrances_are_sealed(self):
        rooms = [rect_room(2, 2), rect_room(20, 2)]
        tile_map = assemble(rooms, DungeonConfig(size=30))

        assert tile_map.count(TileType.DOOR_CLOSED) == 2
        # 8 walls per room plus 3 sealed doors each
        assert tile_map.count(TileType.WALL) == 2 * 8 + 6

    def test_unused_entrances_can_stay_open(self):
        rooms = [rect_room(2, 2), rect_room(20, 2)]
        tile_map = assemble(rooms, DungeonConfig(size=30, seal_unused_entrances=False))
        assert tile_map.count(TileType.DOOR_CLOSED) == 8

    def test_rooms_are_reachable_from_each_other(self):
        rooms = [rect_room(2, 2), rect_room(20, 2), rect_room(10, 20, 7)]
        tile_map = assemble(rooms, DungeonConfig(size=30))

        start = next(rooms[0].floor_cells())
        reached = flood_fill(start, grid_neighbors(tile_map.is_passable))
        for dungeon_room in rooms:
            assert set(dungeon_room.floor_cells()) <= reached

    def test_corridors_never_cut_through_walls(self):
        rooms = [rect_room(2, 2), rect_room(20, 2), rect_room(10, 20, 7)]
        tile_map = assemble(rooms, DungeonConfig(size=30))

        for dungeon_room in rooms:
            for segment in dungeon_room.room.walls:
                for cell in segment:
                    position = dungeon_room.to_world(cell)
                    assert tile_map.get_tile(position).kind == TileType.WALL

    def test_path_between_single_door_rooms(self):
        """Doors at (5, 5) and (25, 5) with nothing between them are 20 steps apart."""
        rooms = [
            DungeonRoom(build_room(RoomShape.POTION, 7), Vector(2, 5)),
            DungeonRoom(build_room(RoomShape.POTION, 7), Vector(22, 5)),
        ]
        doors = [dungeon_room.entrances()[0].position for dungeon_room in rooms]
        assert doors == [Vector(5, 5), Vector(25, 5)]

        tile_map = TileMap(40)
        for dungeon_room in rooms:
            for tile in room_tiles(dungeon_room):
                tile_map.set_tile(tile.position, tile)

        def is_open(position: Vector) -> bool:
            tile = tile_map.get_tile(position)
            return tile_map.in_bounds(position) and (tile is None or not tile.is_solid)

        path = find_grid_path(doors[0], doors[1], is_open)

        assert path is not None
        assert len(path) == 20
        assert all(is_open(cell) for cell in path)

    def test_room_cut_off_by_the_map_edge_is_reported(self, caplog):
        """A room whose only door sits on the edge cannot be joined, and says so."""
        rooms = [
            DungeonRoom(build_room(RoomShape.DEAD_END, 5), Vector(3, 0)),
            rect_room(15, 5),
        ]
        with caplog.at_level(logging.WARNING, logger="labyrinth.assembly"):
            tile_map = assemble(rooms, DungeonConfig(size=30))

        assert "no corridor between room 0 and room 1" in caplog.text
        assert tile_map.count(TileType.CORRIDOR) == 0

    def test_carving_only_fills_missing_cells(self):
        rooms = [rect_room(2, 2), rect_room(20, 2)]
        tile_map = TileMap(30)
        for dungeon_room in rooms:
            for tile in room_tiles(dungeon_room):
                tile_map.set_tile(tile.position, tile)

        used = carve_corridors(tile_map, rooms)

        assert used == {Vector(6, 4), Vector(20, 4)}
        assert tile_map.get_tile(Vector(4, 4)).kind == TileType.FLOOR


class TestPlaceStairs:
    """Stairs go into the first and the last room."""

    def test_no_rooms(self):
        assert place_stairs(TileMap(10), []) == (None, None)

    def test_single_room_gets_only_up_stairs(self):
        rooms = [rect_room(2, 2)]
        tile_map = assemble(rooms, DungeonConfig(size=10))
        up, down = place_stairs(tile_map, rooms)

        assert up == rooms[0].center
        assert down is None
        assert tile_map.get_tile(up).kind == TileType.STAIRS_UP

    @pytest.mark.parametrize("dimension", [4, 5, 9])
    def test_stairs_land_on_floor(self, dimension):
        rooms = [rect_room(1, 1, dimension), rect_room(15, 15, dimension)]
        tile_map = assemble(rooms, DungeonConfig(size=30))
        up, down = place_stairs(tile_map, rooms)

        assert rooms[0].room.floor
        assert up in set(rooms[0].floor_cells())
        assert down in set(rooms[1].floor_cells())
        assert tile_map.get_tile(up).kind == TileType.STAIRS_UP
        assert tile_map.get_tile(down).kind == TileType.STAIRS_DOWN
