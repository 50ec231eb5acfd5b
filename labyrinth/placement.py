"""
Dungeon Room Placement
======================

Each room gets a random position inside the dungeon. A candidate whose box
overlaps a room accepted earlier, or whose entrances would open off the map,
is rejected; after config.placement_attempts rejected candidates the room is
dropped. With placement_attempts=1 a room is dropped on its first rejection,
which can leave noticeably fewer rooms than requested. Either way the number
of placed rooms can be below the target, and callers see that in the length
of the returned list, not as an error.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .config import DungeonConfig
from .geometry import Vector, boxes_intersect
from .rng import RngState
from .templates import Entrance, Room

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DungeonRoom:
    """A Room bound to a world position (its box's north-west corner)."""

    room: Room
    position: Vector

    @property
    def dimension(self) -> int:
        return self.room.dimension

    @property
    def center(self) -> Vector:
        half = (self.dimension - 1) // 2
        return Vector(self.position.x + half, self.position.y + half)

    def contains(self, position: Vector) -> bool:
        """Check if a world position falls inside this room's box."""
        return (
            self.position.x <= position.x < self.position.x + self.dimension
            and self.position.y <= position.y < self.position.y + self.dimension
        )

    def overlaps(self, other: "DungeonRoom", padding: int = 0) -> bool:
        return boxes_intersect(
            self.position, self.dimension, other.position, other.dimension, padding
        )

    def to_world(self, local: Vector) -> Vector:
        return self.position + local

    def floor_cells(self) -> Iterator[Vector]:
        for cell in self.room.floor:
            yield self.to_world(cell)

    def entrances(self) -> List[Entrance]:
        """The room's entrances in world coordinates."""
        return [
            Entrance(
                kind=entrance.kind,
                position=self.to_world(entrance.position),
                facing=entrance.facing,
            )
            for entrance in self.room.entrances
        ]

    def entrances_face_inward(self, size: int) -> bool:
        """Check that every entrance opens onto a cell inside a size x size map."""
        return all(
            (entrance.position + entrance.facing).in_bounds(size, size)
            for entrance in self.entrances()
        )


def place_room(
    room: Room,
    accepted: Sequence[DungeonRoom],
    config: DungeonConfig,
    rng: RngState,
) -> Tuple[Optional[DungeonRoom], RngState]:
    """
    Try to find a free position for one room.

    A candidate is rejected when it overlaps an accepted room, or when one
    of its entrances would open off the edge of the map, where no corridor
    could ever reach it.

    Returns:
        (placed_room, next_state), with placed_room None if every attempt
        was rejected.
    """
    # Keep the whole box inside [0, size)
    limit = config.size - room.dimension
    if limit < 0:
        return None, rng

    for _ in range(config.placement_attempts):
        x, rng = rng.randint(0, limit)
        y, rng = rng.randint(0, limit)
        candidate = DungeonRoom(room=room, position=Vector(x, y))
        if not candidate.entrances_face_inward(config.size):
            continue
        if not any(
            candidate.overlaps(other, config.room_padding) for other in accepted
        ):
            return candidate, rng

    return None, rng


def place_rooms(
    rooms: Sequence[Room], config: DungeonConfig, rng: RngState
) -> Tuple[List[DungeonRoom], RngState]:
    """
    Place rooms in order, keeping only the ones that fit.

    Returns:
        (accepted_rooms, next_state). No two accepted rooms overlap.
    """
    accepted: List[DungeonRoom] = []
    for index, room in enumerate(rooms):
        placed, rng = place_room(room, accepted, config, rng)
        if placed is None:
            logger.debug(
                "dropped room %d (%s, dimension %d) after %d attempts",
                index,
                room.shape.name,
                room.dimension,
                config.placement_attempts,
            )
            continue
        accepted.append(placed)

    if len(accepted) < len(rooms):
        logger.info("placed %d of %d rooms", len(accepted), len(rooms))
    return accepted, rng
