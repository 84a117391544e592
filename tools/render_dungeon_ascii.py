#!/usr/bin/env python3
"""
Render a generated level as ASCII art for debugging.

Usage:
    python tools/render_dungeon_ascii.py [--num-rooms N] [--seed S] [--entities]
"""

import argparse
import logging
import random
import sys
from dataclasses import replace
from pathlib import Path

# Add parent directory to path so we can import delver
sys.path.insert(0, str(Path(__file__).parent.parent))

from delver.config import default_map_config
from delver.dungeon_gen import RoomPlacementError, generate_level
from delver.level_map import TileType
from delver.spawning import spawn_entities


TILE_TO_ASCII = {
    TileType.WALL: "#",
    TileType.CORRIDOR_WALL: "%",
    TileType.FLOOR: ".",
    TileType.EMPTY: " ",
}


def render_dungeon_ascii(level_map, entities=()):
    """Convert a level map to an ASCII string, entities drawn on top."""
    rows = []
    for y in range(level_map.height):
        rows.append(
            [TILE_TO_ASCII.get(level_map.tile_at(x, y), "?") for x in range(level_map.width)]
        )
    for entity in entities:
        glyph = "@" if entity.is_player else (entity.name[:1] or "?")
        rows[entity.y][entity.x] = glyph
    return "\n".join("".join(row) for row in rows)


def main():
    parser = argparse.ArgumentParser(description="Render a level as ASCII art")
    parser.add_argument("--num-rooms", type=int, default=10, help="Number of rooms")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible generation")
    parser.add_argument("--entities", action="store_true", help="Draw spawned entities")
    parser.add_argument("--verbose", action="store_true", help="Log generation details")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    rng = random.Random(args.seed)
    config = replace(default_map_config(), num_rooms=args.num_rooms)

    try:
        level_map = generate_level(config, rng)
    except RoomPlacementError as e:
        print(f"Generation failed: {e}", file=sys.stderr)
        return 1

    entities = spawn_entities(level_map, rng) if args.entities else []
    print(render_dungeon_ascii(level_map, entities))

    print(f"\n--- Debug Info ---")
    print(f"Map size: {level_map.width}x{level_map.height} tiles")
    print(f"Rooms generated: {len(level_map.rooms)}")
    print(f"Start position: {level_map.rooms[0].center()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
