"""
Grid geometry shared by room templates, placement and pathfinding.

Coordinates are integer (x, y) pairs: x grows to the east, y grows to the
south, so (0, 0) is the north-west corner of the dungeon.
"""

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True, order=True)
class Vector:
    """A grid coordinate or a displacement between two grid coordinates."""

    x: int
    y: int

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector":
        return Vector(-self.x, -self.y)

    def chebyshev(self, other: "Vector") -> int:
        """Number of 8-directional steps between two cells."""
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def neighbors(self) -> List["Vector"]:
        """All 8 surrounding cells, orthogonal and diagonal."""
        return [self + step for step in DIRECTIONS]

    def orthogonal_neighbors(self) -> List["Vector"]:
        return [self + step for step in CARDINALS]

    def in_bounds(self, width: int, height: int) -> bool:
        return 0 <= self.x < width and 0 <= self.y < height


NORTH = Vector(0, -1)
EAST = Vector(1, 0)
SOUTH = Vector(0, 1)
WEST = Vector(-1, 0)

CARDINALS: Tuple[Vector, ...] = (NORTH, EAST, SOUTH, WEST)

# Orthogonal steps come first so that searches breaking ties by insertion
# order lay out straight runs
DIRECTIONS: Tuple[Vector, ...] = CARDINALS + (
    NORTH + EAST,
    SOUTH + EAST,
    SOUTH + WEST,
    NORTH + WEST,
)


def chebyshev(a: Vector, b: Vector) -> int:
    """
    Chebyshev distance, max(|dx|, |dy|).

    This is the exact step count for 8-directional movement where a diagonal
    step costs the same as an orthogonal one, so it is an admissible and
    consistent A* heuristic for this grid.
    """
    return max(abs(a.x - b.x), abs(a.y - b.y))


def boxes_intersect(
    a_position: Vector,
    a_size: int,
    b_position: Vector,
    b_size: int,
    padding: int = 0,
) -> bool:
    """
    Check whether two square boxes overlap.

    Each box covers [position, position + size) on both axes. The boxes
    overlap only when their intervals intersect on the x axis and on the y
    axis at the same time. With padding > 0, box A is grown by that many
    cells on every side first, so boxes closer than padding also count.
    """
    return (
        a_position.x - padding < b_position.x + b_size
        and b_position.x < a_position.x + a_size + padding
        and a_position.y - padding < b_position.y + b_size
        and b_position.y < a_position.y + a_size + padding
    )
