#!/usr/bin/env python3
"""
Generate one dungeon level and print statistics about it.

Usage:
    python tools/dungeon_report.py [--size N] [--rooms N] [--seed S] [--attempts N] [--no-corridors]
"""

import argparse
from collections import Counter
import sys
from pathlib import Path

# Add parent directory to path so we can import labyrinth from a checkout
sys.path.insert(0, str(Path(__file__).parent.parent))

from labyrinth.config import DungeonConfig
from labyrinth.dungeon_gen import generate_level
from labyrinth.pathfinding import flood_fill, grid_neighbors
from labyrinth.tiles import TileType


def main():
    parser = argparse.ArgumentParser(description="Report on a generated dungeon level")
    parser.add_argument("--size", type=int, default=50, help="Side of the square dungeon")
    parser.add_argument("--rooms", type=int, default=10, help="Number of rooms to request")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument(
        "--attempts", type=int, default=10, help="Placement attempts per room (1 = no retries)"
    )
    parser.add_argument(
        "--no-corridors", action="store_true", help="Leave the rooms unconnected"
    )
    args = parser.parse_args()

    config = DungeonConfig(
        size=args.size,
        room_count=args.rooms,
        placement_attempts=args.attempts,
        connect_rooms=not args.no_corridors,
    )
    level, rng = generate_level(config, args.seed)
    tile_map = level.tile_map

    print(f"Map size: {tile_map.size}x{tile_map.size} tiles")
    print(f"Rooms placed: {len(level.rooms)} of {level.requested_rooms} requested")

    shapes = Counter(dungeon_room.room.shape.name for dungeon_room in level.rooms)
    for shape, count in sorted(shapes.items()):
        print(f"  {shape}: {count}")

    print("Tiles:")
    for kind in TileType:
        count = tile_map.count(kind)
        if count:
            print(f"  {kind.name}: {count}")

    passable = {position for position in tile_map if tile_map.is_passable(position)}
    if level.upstairs is not None and passable:
        reachable = flood_fill(level.upstairs, grid_neighbors(tile_map.is_passable))
        print(
            f"Reachable from up stairs: {len(reachable)}/{len(passable)} "
            f"({100.0 * len(reachable) / len(passable):.1f}%)"
        )

    print(f"Up stairs: {level.upstairs}  Down stairs: {level.downstairs}")
    print(f"Next RNG state: state={rng.state} inc={rng.inc}")


if __name__ == "__main__":
    main()
