"""
Pathfinding algorithms for dungeon navigation.

One A* search serves every caller: corridor carving at generation time,
click-to-move for the player and chasing for monsters. Callers differ only
in the neighbor function they pass in, which is where obstruction rules live.
"""

from collections import deque
import heapq
import itertools
import logging
from typing import Callable, Dict, Iterable, List, Optional, Set

from .geometry import Vector, chebyshev

logger = logging.getLogger(__name__)

# A path is a list of cells ordered from start to goal, excluding the start
Path = List[Vector]

Heuristic = Callable[[Vector, Vector], int]
NeighborFunction = Callable[[Vector], Iterable[Vector]]


def grid_neighbors(is_enterable: Callable[[Vector], bool]) -> NeighborFunction:
    """Build a neighbor function admitting the 8 surrounding cells that pass is_enterable."""

    def neighbors_of(position: Vector) -> List[Vector]:
        return [cell for cell in position.neighbors() if is_enterable(cell)]

    return neighbors_of


def _reconstruct(
    came_from: Dict[Vector, Vector], start: Vector, goal: Vector
) -> Path:
    path: Path = []
    cell = goal
    while cell != start:
        path.append(cell)
        cell = came_from[cell]
    path.reverse()
    return path


def find_path(
    heuristic: Heuristic,
    neighbors_of: NeighborFunction,
    start: Vector,
    goal: Vector,
    max_expansions: Optional[int] = None,
) -> Optional[Path]:
    """
    Find a shortest path from start to goal with A*.

    Every step costs 1, diagonal or not.

    Args:
        heuristic: Estimate of the remaining steps between two cells; must
            not overestimate (use chebyshev for 8-directional movement)
        neighbors_of: Returns the cells that may be entered from a cell
        start: Starting cell
        goal: Target cell
        max_expansions: Optional cap on the number of cells expanded

    Returns:
        Cells from start to goal (excludes start, includes goal),
        an empty list if start == goal,
        or None if the goal cannot be reached.
    """
    if start == goal:
        return []

    # Ties on f prefer the deeper node, then insertion order
    counter = itertools.count()
    open_heap = [(heuristic(start, goal), 0, next(counter), start)]
    best_cost: Dict[Vector, int] = {start: 0}
    came_from: Dict[Vector, Vector] = {}
    closed: Set[Vector] = set()

    while open_heap:
        _, negative_cost, _, current = heapq.heappop(open_heap)
        if current in closed:
            continue
        if current == goal:
            return _reconstruct(came_from, start, goal)

        closed.add(current)
        if max_expansions is not None and len(closed) > max_expansions:
            logger.debug(
                "gave up on %s -> %s after %d expansions", start, goal, max_expansions
            )
            return None

        next_cost = -negative_cost + 1
        for neighbor in neighbors_of(current):
            if neighbor in closed:
                continue
            if next_cost < best_cost.get(neighbor, next_cost + 1):
                best_cost[neighbor] = next_cost
                came_from[neighbor] = current
                heapq.heappush(
                    open_heap,
                    (
                        next_cost + heuristic(neighbor, goal),
                        -next_cost,
                        next(counter),
                        neighbor,
                    ),
                )

    return None


def find_grid_path(
    start: Vector,
    goal: Vector,
    is_enterable: Callable[[Vector], bool],
    max_expansions: Optional[int] = None,
) -> Optional[Path]:
    """find_path with the Chebyshev heuristic over 8-connected grid cells."""
    return find_path(
        chebyshev, grid_neighbors(is_enterable), start, goal, max_expansions
    )


def flood_fill(start: Vector, neighbors_of: NeighborFunction) -> Set[Vector]:
    """Every cell reachable from start, start included."""
    visited: Set[Vector] = {start}
    queue = deque([start])
    while queue:
        cell = queue.popleft()
        for neighbor in neighbors_of(cell):
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)
    return visited
