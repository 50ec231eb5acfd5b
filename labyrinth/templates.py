"""
Room Template Library
=====================

Every room shape is a pure function from a dimension to a blueprint:

- the footprint: every cell the room covers, inside [0, dimension) on both axes
- an anchor: a cell in the middle of the room that is guaranteed to be floor
- the openings: which directions get an entrance, and what kind

A shared carving step turns a blueprint into a Room:

1. The outline is every footprint cell with at least one of its 8 neighbors
   outside the footprint. Floor cells never touch the outside, not even
   diagonally, so the outline blocks 8-directional movement.
2. For each opening, walk from the anchor in that direction until the first
   outline cell. That cell becomes the entrance. Any footprint cells further
   out on the same ray are trimmed off so the entrance faces the outside.
3. Recompute the outline on the trimmed footprint. Floor is footprint minus
   outline. Outline cells with outline neighbors on both axes are corners,
   the rest are walls, grouped into 4-connected wall segments.

Templates contain no randomness: the Room Generator picks the shape and the
dimension.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache
from typing import Callable, Dict, FrozenSet, Iterator, List, Set, Tuple

from .geometry import EAST, NORTH, SOUTH, WEST, Vector


class RoomShape(Enum):
    """The closed set of room shapes."""

    RECTANGULAR = auto()
    CROSS = auto()
    DIAMOND = auto()
    POTION = auto()
    CIRCULAR = auto()
    DIAGONAL_SQUARES = auto()
    DEAD_END = auto()


class EntranceKind(Enum):
    """What an entrance cell becomes once the room is placed."""

    DOOR = auto()  # closed door
    NO_DOOR = auto()  # open passage, plain floor


@dataclass(frozen=True)
class Entrance:
    """An entrance cell in room-local coordinates."""

    kind: EntranceKind
    position: Vector
    # Unit vector pointing out of the room
    facing: Vector


@dataclass(frozen=True)
class Room:
    """
    A shape instantiated at a concrete dimension.

    All positions are local to the room's own (0, 0) origin. The floor,
    wall, corner and entrance cells are pairwise disjoint.
    """

    shape: RoomShape
    dimension: int
    floor: FrozenSet[Vector]
    # One group per wall segment
    walls: Tuple[FrozenSet[Vector], ...]
    corners: FrozenSet[Vector]
    entrances: Tuple[Entrance, ...]

    @property
    def wall_cells(self) -> FrozenSet[Vector]:
        return frozenset().union(*self.walls)

    @property
    def entrance_cells(self) -> FrozenSet[Vector]:
        return frozenset(entrance.position for entrance in self.entrances)

    def cells(self) -> Iterator[Vector]:
        """Every cell the room covers."""
        yield from self.floor
        yield from self.wall_cells
        yield from self.corners
        yield from self.entrance_cells


@dataclass(frozen=True)
class _Blueprint:
    cells: FrozenSet[Vector]
    anchor: Vector
    openings: Tuple[Tuple[Vector, EntranceKind], ...]


def _square(x_range: range, y_range: range) -> Set[Vector]:
    return {Vector(x, y) for x in x_range for y in y_range}


def _four_way(kind: EntranceKind) -> Tuple[Tuple[Vector, EntranceKind], ...]:
    return tuple((direction, kind) for direction in (NORTH, EAST, SOUTH, WEST))


def _rectangular(dimension: int) -> _Blueprint:
    center = (dimension - 1) // 2
    return _Blueprint(
        cells=frozenset(_square(range(dimension), range(dimension))),
        anchor=Vector(center, center),
        openings=_four_way(EntranceKind.DOOR),
    )


def _cross(dimension: int) -> _Blueprint:
    center = (dimension - 1) // 2
    half_width = max(1, dimension // 6)
    band = range(center - half_width, center + half_width + 1)
    cells = _square(band, range(dimension)) | _square(range(dimension), band)
    return _Blueprint(
        cells=frozenset(cells),
        anchor=Vector(center, center),
        openings=_four_way(EntranceKind.NO_DOOR),
    )


def _diamond(dimension: int) -> _Blueprint:
    center = (dimension - 1) // 2
    cells = {
        Vector(x, y)
        for x in range(2 * center + 1)
        for y in range(2 * center + 1)
        if abs(x - center) + abs(y - center) <= center
    }
    return _Blueprint(
        cells=frozenset(cells),
        anchor=Vector(center, center),
        openings=_four_way(EntranceKind.DOOR),
    )


def _disc(center: Vector, radius: int) -> Set[Vector]:
    # r*r + r rounds the edge outwards, giving rounder small circles
    limit = radius * radius + radius
    return {
        Vector(x, y)
        for x in range(center.x - radius, center.x + radius + 1)
        for y in range(center.y - radius, center.y + radius + 1)
        if (x - center.x) ** 2 + (y - center.y) ** 2 <= limit
    }


def _circular(dimension: int) -> _Blueprint:
    center = (dimension - 1) // 2
    return _Blueprint(
        cells=frozenset(_disc(Vector(center, center), center)),
        anchor=Vector(center, center),
        openings=_four_way(EntranceKind.NO_DOOR),
    )


def _potion(dimension: int) -> _Blueprint:
    # A round flask body at the bottom, a 3-wide neck up to the top edge
    center = (dimension - 1) // 2
    body_radius = center - 1
    body_center = Vector(center, dimension - 1 - body_radius)
    neck = _square(range(center - 1, center + 2), range(0, body_center.y + 1))
    return _Blueprint(
        cells=frozenset(_disc(body_center, body_radius) | neck),
        anchor=body_center,
        openings=((NORTH, EntranceKind.DOOR),),
    )


def _diagonal_squares(dimension: int) -> _Blueprint:
    # Two overlapping squares, one in the north-west corner, one in the south-east
    side = (2 * dimension + 2) // 3
    offset = dimension - side
    cells = _square(range(side), range(side)) | _square(
        range(offset, dimension), range(offset, dimension)
    )
    center = (dimension - 1) // 2
    return _Blueprint(
        cells=frozenset(cells),
        anchor=Vector(center, center),
        openings=_four_way(EntranceKind.DOOR),
    )


def _dead_end(dimension: int) -> _Blueprint:
    # A corridor stub running north to south with its only opening at the top
    center = (dimension - 1) // 2
    cells = _square(range(center - 1, center + 2), range(dimension))
    return _Blueprint(
        cells=frozenset(cells),
        anchor=Vector(center, dimension - 2),
        openings=((NORTH, EntranceKind.NO_DOOR),),
    )


_BLUEPRINTS: Dict[RoomShape, Callable[[int], _Blueprint]] = {
    RoomShape.RECTANGULAR: _rectangular,
    RoomShape.CROSS: _cross,
    RoomShape.DIAMOND: _diamond,
    RoomShape.POTION: _potion,
    RoomShape.CIRCULAR: _circular,
    RoomShape.DIAGONAL_SQUARES: _diagonal_squares,
    RoomShape.DEAD_END: _dead_end,
}

# Smallest dimension that still leaves floor behind every entrance
MIN_DIMENSION: Dict[RoomShape, int] = {
    RoomShape.RECTANGULAR: 3,
    RoomShape.CROSS: 5,
    RoomShape.DIAMOND: 5,
    RoomShape.POTION: 7,
    RoomShape.CIRCULAR: 5,
    RoomShape.DIAGONAL_SQUARES: 7,
    RoomShape.DEAD_END: 3,
}


def _outline(cells: Set[Vector]) -> Set[Vector]:
    return {
        cell
        for cell in cells
        if any(neighbor not in cells for neighbor in cell.neighbors())
    }


def _wall_segments(walls: Set[Vector]) -> Tuple[FrozenSet[Vector], ...]:
    """Group wall cells into 4-connected segments, ordered by their first cell."""
    remaining = set(walls)
    segments: List[FrozenSet[Vector]] = []
    while remaining:
        seed = min(remaining)
        remaining.discard(seed)
        segment = {seed}
        queue = deque([seed])
        while queue:
            cell = queue.popleft()
            for neighbor in cell.orthogonal_neighbors():
                if neighbor in remaining:
                    remaining.discard(neighbor)
                    segment.add(neighbor)
                    queue.append(neighbor)
        segments.append(frozenset(segment))
    return tuple(segments)


def _carve(shape: RoomShape, dimension: int, blueprint: _Blueprint) -> Room:
    cells = set(blueprint.cells)
    outline = _outline(cells)
    if blueprint.anchor not in cells or blueprint.anchor in outline:
        raise ValueError(f"{shape.name} room of dimension {dimension} has no floor")

    entrances: List[Entrance] = []
    for direction, kind in blueprint.openings:
        cursor = blueprint.anchor
        while cursor not in outline:
            cursor = cursor + direction
        entrances.append(Entrance(kind=kind, position=cursor, facing=direction))

        beyond = cursor + direction
        while beyond in cells:
            cells.discard(beyond)
            beyond = beyond + direction

    outline = _outline(cells)
    doorways = {entrance.position for entrance in entrances}
    floor = cells - outline

    corners: Set[Vector] = set()
    walls: Set[Vector] = set()
    for cell in outline - doorways:
        horizontal = cell + EAST in outline or cell + WEST in outline
        vertical = cell + NORTH in outline or cell + SOUTH in outline
        if horizontal and vertical:
            corners.add(cell)
        else:
            walls.add(cell)

    return Room(
        shape=shape,
        dimension=dimension,
        floor=frozenset(floor),
        walls=_wall_segments(walls),
        corners=frozenset(corners),
        entrances=tuple(entrances),
    )


@lru_cache(maxsize=None)
def build_room(shape: RoomShape, dimension: int) -> Room:
    """
    Build the room for a shape at a concrete dimension.

    Args:
        shape: Which template to use
        dimension: Side of the room's square bounding box, in tiles

    Returns:
        The Room, with every cell inside [0, dimension) on both axes.

    Raises:
        ValueError: If dimension is below MIN_DIMENSION for the shape.
    """
    minimum = MIN_DIMENSION[shape]
    if dimension < minimum:
        raise ValueError(
            f"{shape.name} rooms need a dimension of at least {minimum}, got {dimension}"
        )
    return _carve(shape, dimension, _BLUEPRINTS[shape](dimension))
