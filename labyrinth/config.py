"""
Dungeon generation settings and their validation.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Tuple

from .templates import MIN_DIMENSION, RoomShape


class ConfigurationError(ValueError):
    """Raised when a DungeonConfig cannot produce valid geometry."""


# Rectangular rooms are the bread and butter, the odd shapes add flavor
DEFAULT_SHAPE_WEIGHTS: Dict[RoomShape, float] = {
    RoomShape.RECTANGULAR: 3.0,
    RoomShape.CROSS: 1.0,
    RoomShape.DIAMOND: 1.0,
    RoomShape.POTION: 1.0,
    RoomShape.CIRCULAR: 1.0,
    RoomShape.DIAGONAL_SQUARES: 1.0,
    RoomShape.DEAD_END: 1.0,
}

# (min, max) dimension per shape, both inclusive
DEFAULT_SIZE_BOUNDS: Dict[RoomShape, Tuple[int, int]] = {
    RoomShape.RECTANGULAR: (4, 10),
    RoomShape.CROSS: (5, 11),
    RoomShape.DIAMOND: (5, 11),
    RoomShape.POTION: (7, 11),
    RoomShape.CIRCULAR: (5, 11),
    RoomShape.DIAGONAL_SQUARES: (7, 12),
    RoomShape.DEAD_END: (3, 6),
}


@dataclass
class DungeonConfig:
    # Side of the square dungeon, in tiles
    size: int = 50
    # Target number of rooms; placement may deliver fewer
    room_count: int = 10
    shape_weights: Mapping[RoomShape, float] = field(
        default_factory=lambda: dict(DEFAULT_SHAPE_WEIGHTS)
    )
    size_bounds: Mapping[RoomShape, Tuple[int, int]] = field(
        default_factory=lambda: dict(DEFAULT_SIZE_BOUNDS)
    )
    # Candidate positions tried per room before it is dropped.
    # 1 reproduces the discard-on-first-overlap behaviour.
    placement_attempts: int = 10
    # Empty cells required between two room boxes
    room_padding: int = 1
    connect_rooms: bool = True
    seal_unused_entrances: bool = True
    place_stairs: bool = True

    def enabled_shapes(self) -> Tuple[RoomShape, ...]:
        """Shapes with a positive weight, in declaration order."""
        return tuple(
            shape for shape in RoomShape if self.shape_weights.get(shape, 0) > 0
        )

    def dimension_bounds(self, shape: RoomShape) -> Tuple[int, int]:
        """Inclusive dimension range for a shape, clamped to the dungeon size."""
        low, high = self.size_bounds[shape]
        return low, min(high, self.size)

    def validate(self) -> None:
        """
        Check the configuration before anything is generated.

        Raises:
            ConfigurationError: Describing the first problem found.
        """
        if self.size < 1:
            raise ConfigurationError(f"size must be positive, got {self.size}")
        if self.room_count < 0:
            raise ConfigurationError(
                f"room_count must not be negative, got {self.room_count}"
            )
        if self.placement_attempts < 1:
            raise ConfigurationError(
                f"placement_attempts must be at least 1, got {self.placement_attempts}"
            )
        if self.room_padding < 0:
            raise ConfigurationError(
                f"room_padding must not be negative, got {self.room_padding}"
            )

        for shape, weight in self.shape_weights.items():
            if not isinstance(shape, RoomShape):
                raise ConfigurationError(f"unknown room shape {shape!r}")
            if weight < 0:
                raise ConfigurationError(
                    f"weight for {shape.name} must not be negative, got {weight}"
                )
        if not self.enabled_shapes():
            raise ConfigurationError("at least one room shape needs a positive weight")

        for shape, bounds in self.size_bounds.items():
            if not isinstance(shape, RoomShape):
                raise ConfigurationError(f"unknown room shape {shape!r}")
            low, high = bounds
            if low < MIN_DIMENSION[shape]:
                raise ConfigurationError(
                    f"{shape.name} rooms need a dimension of at least "
                    f"{MIN_DIMENSION[shape]}, configured minimum is {low}"
                )
            if low > high:
                raise ConfigurationError(
                    f"{shape.name} size bounds are empty: ({low}, {high})"
                )

        for shape in self.enabled_shapes():
            if shape not in self.size_bounds:
                raise ConfigurationError(f"no size bounds configured for {shape.name}")
            low, _ = self.size_bounds[shape]
            if low > self.size:
                raise ConfigurationError(
                    f"dungeon of size {self.size} is too small for {shape.name} "
                    f"rooms of dimension {low}"
                )
