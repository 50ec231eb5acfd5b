"""Procedural dungeon generation and grid pathfinding."""

from labyrinth.geometry import Vector, chebyshev, boxes_intersect
from labyrinth.rng import RngState
from labyrinth.tiles import Tile, TileType
from labyrinth.templates import (
    RoomShape,
    EntranceKind,
    Entrance,
    Room,
    build_room,
)
from labyrinth.config import DungeonConfig, ConfigurationError
from labyrinth.rooms import generate_room, generate_rooms
from labyrinth.placement import DungeonRoom, place_rooms
from labyrinth.tilemap import TileMap
from labyrinth.assembly import assemble
from labyrinth.pathfinding import find_path, find_grid_path, grid_neighbors, Path
from labyrinth.world import Hero, Monster, Building, Obstruction, World, query_position
from labyrinth.strategy import (
    MoveCommand,
    AttackCommand,
    EnterBuildingCommand,
    ClickToMoveStrategy,
    ChaseStrategy,
    resolve_step,
)
from labyrinth.event_system import Event, EventBus, EventData
from labyrinth.dungeon_gen import Level, generate, generate_level, create_world
