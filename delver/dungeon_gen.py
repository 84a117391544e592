"""
Dungeon Generation Algorithm
============================

A level is built once, in four passes over a blank grid:

1. Room layout: sample random rectangles inside the placement bounds and keep
   every one that does not touch a room we already kept, until we have
   ``num_rooms`` of them (or run out of attempts).
2. Corridors: connect each room to a few random others with L-shaped runs of
   rectangles (see corridors.py).
3. Rasterize: paint corridors, then rooms, as a floor interior ringed by a
   one-tile wall. Rooms win wherever they overlap a corridor.
4. Doors: wherever a corridor ran into a room, the room wall now sits between
   two floor tiles. Those wall tiles are opened up into doors.
"""

import logging
import random
from typing import List, Optional, Sequence

import numpy as np

from .config import MapGenConfig
from .corridors import connect_rooms
from .level_map import LevelMap, Rect, TileType

logger = logging.getLogger(__name__)


class RoomPlacementError(RuntimeError):
    """Room placement ran out of attempts before placing every room."""

    def __init__(self, placed: List[Rect], wanted: int, attempts: int) -> None:
        super().__init__(
            f"Placed {len(placed)} of {wanted} rooms in {attempts} attempts"
        )
        self.placed = placed
        self.wanted = wanted
        self.attempts = attempts


def _sample_room(config: MapGenConfig, rng: random.Random) -> Rect:
    width = rng.randint(config.min_room_width, config.max_room_width)
    height = rng.randint(config.min_room_height, config.max_room_height)
    x = rng.randint(config.min_x, config.max_x - width)
    y = rng.randint(config.min_y, config.max_y - height)
    return Rect.with_size(x, y, width, height)


def generate_rooms(config: MapGenConfig, rng: random.Random) -> List[Rect]:
    """
    Place ``config.num_rooms`` non-overlapping rooms.

    Candidates that leave the placement bounds or touch an accepted room are
    thrown away and resampled.

    Raises:
        RoomPlacementError: If ``config.max_placement_attempts`` candidates
            were drawn without filling the level.
    """
    rooms: List[Rect] = []
    attempts = 0

    while len(rooms) < config.num_rooms:
        if attempts >= config.max_placement_attempts:
            raise RoomPlacementError(rooms, config.num_rooms, attempts)
        attempts += 1

        candidate = _sample_room(config, rng)
        if not candidate.fits_within(config.min_x, config.min_y, config.max_x, config.max_y):
            logger.debug("Rejected %s: out of bounds", candidate)
            continue
        if any(candidate.intersects(other) for other in rooms):
            logger.debug("Rejected %s: overlaps an existing room", candidate)
            continue

        rooms.append(candidate)

    logger.debug("Placed %d rooms in %d attempts", len(rooms), attempts)
    return rooms


def _paint_border(tiles: np.ndarray, rect: Rect, wall: TileType) -> None:
    tiles[rect.y1, rect.x1 : rect.x2 + 1] = wall
    tiles[rect.y2, rect.x1 : rect.x2 + 1] = wall
    tiles[rect.y1 : rect.y2 + 1, rect.x1] = wall
    tiles[rect.y1 : rect.y2 + 1, rect.x2] = wall


def _paint_interior(tiles: np.ndarray, rect: Rect) -> None:
    # Empty for rectangles less than three tiles across
    tiles[rect.y1 + 1 : rect.y2, rect.x1 + 1 : rect.x2] = TileType.FLOOR


def paint(
    level_map: LevelMap, rooms: Sequence[Rect], corridors: Sequence[Rect]
) -> None:
    """
    Paint rooms and corridors onto the map's tiles.

    All corridor walls go down before any corridor floor, so crossing
    corridors open into each other. Rooms are painted last, one at a time,
    and overwrite whatever the corridors left underneath them.
    """
    tiles = level_map.tiles

    for corridor in corridors:
        _paint_border(tiles, corridor, TileType.CORRIDOR_WALL)
    for corridor in corridors:
        _paint_interior(tiles, corridor)

    for room in rooms:
        _paint_interior(tiles, room)
        _paint_border(tiles, room, TileType.WALL)


def find_door_candidates(tiles: np.ndarray) -> np.ndarray:
    """
    Find the wall tiles that separate two floor tiles.

    A wall tile qualifies when its left and right neighbours are floor and
    the tiles above and below are wall, or the same rotated by 90 degrees.
    The outer border of the map is never a candidate.

    Returns:
        Boolean mask, same shape as ``tiles``.
    """
    mask = np.zeros(tiles.shape, dtype=bool)
    if tiles.shape[0] < 3 or tiles.shape[1] < 3:
        return mask

    center = tiles[1:-1, 1:-1]
    up = tiles[:-2, 1:-1]
    down = tiles[2:, 1:-1]
    left = tiles[1:-1, :-2]
    right = tiles[1:-1, 2:]

    floor, wall = TileType.FLOOR, TileType.WALL
    horizontal_passage = (left == floor) & (right == floor) & (up == wall) & (down == wall)
    vertical_passage = (up == floor) & (down == floor) & (left == wall) & (right == wall)

    mask[1:-1, 1:-1] = (center == wall) & (horizontal_passage | vertical_passage)
    return mask


def insert_doors(level_map: LevelMap) -> int:
    """
    Turn qualifying wall tiles into doors (floor).

    Every tile is judged against the layout as the rasterizer left it, so a
    door opened here never makes a neighbour into a door too.

    Returns:
        Number of doors created.
    """
    doors = find_door_candidates(level_map.tiles)
    level_map.tiles[doors] = TileType.FLOOR
    count = int(doors.sum())
    logger.debug("Inserted %d doors", count)
    return count


def generate_level(
    config: MapGenConfig,
    rng: Optional[random.Random] = None,
    depth: int = 0,
) -> LevelMap:
    """
    Build a complete level: rooms, corridors, tiles and doors.

    Parameters:
        config: Room and corridor settings; also fixes the map size
        rng: Random source. A fresh unseeded one is used if omitted.
        depth: Level counter stored on the map

    Returns:
        The finished map with ``rooms`` filled in for spawn placement.
    """
    if rng is None:
        rng = random.Random()

    level_map = LevelMap(config.map_width, config.map_height, depth=depth)

    rooms = generate_rooms(config, rng)
    corridors = connect_rooms(config, rng, rooms)
    paint(level_map, rooms, corridors)
    door_count = insert_doors(level_map)

    level_map.rooms = rooms

    logger.info(
        "Generated level depth=%d: %d rooms, %d corridor segments, %d doors",
        depth,
        len(rooms),
        len(corridors),
        door_count,
    )
    return level_map
