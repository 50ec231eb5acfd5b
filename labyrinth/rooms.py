"""
Room Generator: picks a shape and a dimension, then builds the room.

Every function takes an RngState and returns the advanced state next to its
result, so the same state always yields the same rooms.
"""

from typing import List, Tuple

from .config import DungeonConfig
from .rng import RngState
from .templates import Room, RoomShape, build_room


def pick_shape(config: DungeonConfig, rng: RngState) -> Tuple[RoomShape, RngState]:
    """Pick a room shape weighted by config.shape_weights."""
    shapes = config.enabled_shapes()
    weights = [config.shape_weights[shape] for shape in shapes]
    return rng.weighted_choice(shapes, weights)


def generate_room(config: DungeonConfig, rng: RngState) -> Tuple[Room, RngState]:
    """
    Generate one room.

    Args:
        config: A validated configuration
        rng: Stream state to draw from

    Returns:
        (room, next_state)
    """
    shape, rng = pick_shape(config, rng)
    low, high = config.dimension_bounds(shape)
    dimension, rng = rng.randint(low, high)
    return build_room(shape, dimension), rng


def generate_rooms(config: DungeonConfig, rng: RngState) -> Tuple[List[Room], RngState]:
    """Generate config.room_count rooms in sequence."""
    rooms: List[Room] = []
    for _ in range(config.room_count):
        room, rng = generate_room(config, rng)
        rooms.append(room)
    return rooms, rng
