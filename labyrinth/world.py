"""
Live level state and the obstruction query.

The World bundles a tile map with the actors on it. Its query_position is the
single place that answers "what is in this cell", and both path queries and
the move/attack/enter decision read from it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Optional, Sequence, Union

from .event_system import Event, EventBus
from .geometry import Vector
from .pathfinding import NeighborFunction, grid_neighbors
from .tilemap import TileMap
from .tiles import TileType

logger = logging.getLogger(__name__)


@dataclass
class Hero:
    """The player character."""

    position: Vector
    actor_id: str = "hero"


@dataclass
class Monster:
    """A hostile actor; it blocks one cell."""

    monster_id: str
    position: Vector
    name: str = ""

    @property
    def actor_id(self) -> str:
        return self.monster_id


@dataclass
class Building:
    """
    A structure standing on the map (a shop, a temple).

    Buildings do not change tiles; they occupy a footprint of cells that the
    hero can enter and nobody can walk through.
    """

    building_id: str
    footprint: FrozenSet[Vector] = field(default_factory=frozenset)
    name: str = ""

    def occupies(self, position: Vector) -> bool:
        return position in self.footprint


Actor = Union[Hero, Monster]


@dataclass(frozen=True)
class Obstruction:
    """Everything that stands in a cell."""

    tile_blocked: bool
    building: Optional[Building] = None
    monster: Optional[Monster] = None
    is_hero: bool = False

    @property
    def occupied(self) -> bool:
        """Something other than the tile itself is in the cell."""
        return self.building is not None or self.monster is not None or self.is_hero

    @property
    def is_free(self) -> bool:
        return not self.tile_blocked and not self.occupied


def query_position(
    position: Vector,
    tile_map: TileMap,
    hero: Optional[Hero] = None,
    monsters: Sequence[Monster] = (),
    buildings: Sequence[Building] = (),
) -> Obstruction:
    """
    Classify a cell against the current world state.

    Out-of-bounds and missing cells report tile_blocked=True and nothing
    else. This is a pure read.
    """
    if tile_map.is_solid(position):
        return Obstruction(tile_blocked=True)

    building = next((b for b in buildings if b.occupies(position)), None)
    monster = next((m for m in monsters if m.position == position), None)
    return Obstruction(
        tile_blocked=False,
        building=building,
        monster=monster,
        is_hero=hero is not None and hero.position == position,
    )


class World:
    def __init__(
        self,
        tile_map: TileMap,
        hero: Optional[Hero] = None,
        monsters: Optional[List[Monster]] = None,
        buildings: Optional[List[Building]] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.tile_map: TileMap = tile_map
        self.hero: Optional[Hero] = hero
        self.monsters: List[Monster] = list(monsters) if monsters else []
        self.buildings: List[Building] = list(buildings) if buildings else []
        self.event_bus: Optional[EventBus] = None
        if event_bus is not None:
            self.set_event_bus(event_bus)

    def set_event_bus(self, bus: EventBus) -> None:
        """Route world and tile map notifications to bus."""
        self.event_bus = bus
        self.tile_map.event_bus = bus

    def _emit(self, event: Event, **kwargs: Any) -> None:
        if self.event_bus:
            self.event_bus.emit(event, **kwargs)

    def query_position(self, position: Vector) -> Obstruction:
        return query_position(
            position, self.tile_map, self.hero, self.monsters, self.buildings
        )

    def is_enterable(
        self,
        position: Vector,
        mover: Optional[Actor] = None,
        goal: Optional[Vector] = None,
    ) -> bool:
        """
        Decide whether a path for mover may step into position.

        Solid tiles never admit anyone. Occupied cells are admitted when the
        only occupant is the mover itself, or when the cell is the goal of
        the path, so that a path can lead onto a monster to attack it or
        onto a building to enter it.
        """
        obstruction = self.query_position(position)
        if obstruction.tile_blocked:
            return False
        if not obstruction.occupied or position == goal:
            return True
        if obstruction.building is not None:
            return False
        if obstruction.monster is not None and obstruction.monster is not mover:
            return False
        if obstruction.is_hero and mover is not self.hero:
            return False
        return True

    def neighbors_for(
        self, mover: Optional[Actor] = None, goal: Optional[Vector] = None
    ) -> NeighborFunction:
        """Neighbor function for a path query by mover towards goal."""
        return grid_neighbors(
            lambda position: self.is_enterable(position, mover=mover, goal=goal)
        )

    def add_monster(self, monster: Monster) -> None:
        self.monsters.append(monster)
        self._emit(Event.ACTOR_ADDED, actor_id=monster.monster_id)

    def remove_monster(self, monster_id: str) -> Monster:
        """
        Remove a monster by id.

        Raises:
            KeyError: If no monster has that id.
        """
        for index, monster in enumerate(self.monsters):
            if monster.monster_id == monster_id:
                self.monsters.pop(index)
                self._emit(Event.ACTOR_REMOVED, actor_id=monster_id)
                return monster
        raise KeyError(monster_id)

    def find_monster_at(self, position: Vector) -> Optional[Monster]:
        return self.query_position(position).monster

    def add_building(self, building: Building) -> None:
        self.buildings.append(building)

    def find_building_at(self, position: Vector) -> Optional[Building]:
        return self.query_position(position).building

    def move_actor(self, actor: Actor, destination: Vector) -> None:
        """
        Move an actor one step, opening a closed door it steps into.

        The caller has already decided the move is legal (see
        strategy.resolve_step).
        """
        tile = self.tile_map.get_tile(destination)
        if tile is not None and tile.kind == TileType.DOOR_CLOSED:
            self.tile_map.open_door(destination)

        source = actor.position
        actor.position = destination
        self._emit(
            Event.ACTOR_MOVED,
            actor_id=actor.actor_id,
            source=source,
            destination=destination,
        )
