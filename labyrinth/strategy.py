"""
Movement strategies for the hero and monsters.

Strategies turn a goal (a clicked cell, the hero's position) into one step
per tick. They decide; they do not move anyone. The caller applies a
MoveCommand with World.move_actor and hands AttackCommand and
EnterBuildingCommand to its combat and building screens.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import Optional, Union

from .geometry import Vector, chebyshev
from .pathfinding import Path, find_path
from .world import Actor, Building, Hero, Monster, World

logger = logging.getLogger(__name__)


@dataclass
class MoveCommand:
    """Step into a free cell."""

    target: Vector


@dataclass
class AttackCommand:
    """Attack whoever stands in target: a monster, or the hero."""

    target: Vector
    monster: Optional[Monster] = None
    hits_hero: bool = False


@dataclass
class EnterBuildingCommand:
    """The hero walks into a building."""

    target: Vector
    building: Building


# None means no movement happens this tick
StrategyCommand = Optional[Union[MoveCommand, AttackCommand, EnterBuildingCommand]]


def resolve_step(world: World, mover: Actor, target: Vector) -> StrategyCommand:
    """
    Decide what stepping into target means for mover.

    Priority: attacking beats entering a building, which beats being
    blocked, which beats a free move. Only the hero enters buildings and
    attacks monsters; monsters attack only the hero.
    """
    obstruction = world.query_position(target)
    is_hero = mover is world.hero

    if is_hero and obstruction.monster is not None:
        return AttackCommand(target=target, monster=obstruction.monster)
    if not is_hero and obstruction.is_hero:
        return AttackCommand(target=target, hits_hero=True)

    if is_hero and obstruction.building is not None:
        return EnterBuildingCommand(target=target, building=obstruction.building)

    if not obstruction.is_free:
        return None

    return MoveCommand(target=target)


def plan_path(world: World, mover: Actor, goal: Vector) -> Optional[Path]:
    """Shortest path for mover to goal under the live obstruction rules."""
    return find_path(
        chebyshev, world.neighbors_for(mover, goal), mover.position, goal
    )


class Strategy(ABC):
    """Decides the next step of one actor, once per tick."""

    @abstractmethod
    def decide_next_move(self, actor: Actor, world: World) -> StrategyCommand:
        """
        Decide the next step for actor.

        Returns:
            A command for the caller to carry out, or None if the actor
            stays where it is.
        """


class ClickToMoveStrategy(Strategy):
    """
    Walk the hero to a clicked cell.

    The path is computed once per destination and followed step by step.
    If the world changed so that the next step is no longer enterable, the
    path is recomputed once; if the destination has become unreachable the
    hero stops.
    """

    def __init__(self, destination: Optional[Vector] = None) -> None:
        self.destination: Optional[Vector] = destination
        self.current_path: Optional[Path] = None
        self.path_index: int = 0

    def set_destination(self, destination: Optional[Vector]) -> None:
        self.destination = destination
        self.current_path = None
        self.path_index = 0

    def _recompute(
        self, actor: Actor, world: World, destination: Vector
    ) -> Optional[Path]:
        path = plan_path(world, actor, destination)
        self.current_path = path
        self.path_index = 0
        if not path:
            logger.debug(
                "destination %s unreachable from %s", destination, actor.position
            )
            self.set_destination(None)
            return None
        return path

    def decide_next_move(self, actor: Actor, world: World) -> StrategyCommand:
        destination = self.destination
        if destination is None:
            return None
        if actor.position == destination:
            self.set_destination(None)
            return None

        path = self.current_path
        if path is None or self.path_index >= len(path):
            path = self._recompute(actor, world, destination)
            if path is None:
                return None

        next_step = path[self.path_index]
        if next_step != destination and not world.is_enterable(
            next_step, mover=actor, goal=destination
        ):
            path = self._recompute(actor, world, destination)
            if path is None:
                return None
            next_step = path[self.path_index]

        command = resolve_step(world, actor, next_step)
        if isinstance(command, MoveCommand):
            self.path_index += 1
        else:
            # Attacking, entering or blocked ends the walk
            self.set_destination(None)
        return command


class ChaseStrategy(Strategy):
    """
    Move a monster one step towards the hero.

    The path is recomputed from scratch every tick and only its first step is
    used, so the monster re-routes as soon as the world changes.
    """

    def decide_next_move(self, actor: Actor, world: World) -> StrategyCommand:
        hero: Optional[Hero] = world.hero
        if hero is None:
            return None

        path = plan_path(world, actor, hero.position)
        if not path:
            return None
        return resolve_step(world, actor, path[0])
