"""
Corridor routing between room centers.

Two room centers span a bounding rectangle. A corridor hugs two adjacent
edges of that rectangle, making an L from one center to the other. Which two
edges depends on which way the diagonal between the centers leans:

    first.x <= second.x          first.x > second.x

    A----+   or  A               +----A   or       A
         |       |               |                 |
         B       +----B          B            B----+

Each edge is turned into a rectangle by growing it outward by the corridor
thickness, so the floor runs along the edge with a wall on either side.
"""

import logging
import random
from typing import List, Sequence, Tuple

from .config import MapGenConfig
from .level_map import Rect

logger = logging.getLogger(__name__)

Point = Tuple[int, int]
CorridorPath = List[Rect]


def order_points(a: Point, b: Point) -> Tuple[Point, Point]:
    """Put the point with the smaller y first, breaking ties on x."""
    ax, ay = a
    bx, by = b
    if (ay, ax) <= (by, bx):
        return a, b
    return b, a


def canonical_rect(first: Point, second: Point) -> Rect:
    """The bounding rectangle of two points already in canonical order."""
    (x1, y1), (x2, y2) = first, second
    return Rect(min(x1, x2), y1, max(x1, x2), y2)


def _edges(bounds: Rect) -> Tuple[Rect, Rect, Rect, Rect]:
    top = Rect(bounds.x1, bounds.y1, bounds.x2, bounds.y1)
    bottom = Rect(bounds.x1, bounds.y2, bounds.x2, bounds.y2)
    left = Rect(bounds.x1, bounds.y1, bounds.x1, bounds.y2)
    right = Rect(bounds.x2, bounds.y1, bounds.x2, bounds.y2)
    return top, bottom, left, right


def candidate_paths(
    first: Point, second: Point, thickness: int
) -> Tuple[CorridorPath, CorridorPath]:
    """
    The two L-shaped paths between two canonically ordered points.

    Edges of zero length are left out, so two points on the same row or
    column give a single straight segment.
    """
    bounds = canonical_rect(first, second)
    top, bottom, left, right = _edges(bounds)

    if first[0] <= second[0]:
        choices = ([top, right], [left, bottom])
    else:
        choices = ([top, left], [right, bottom])

    paths = tuple(
        [edge.expand(thickness) for edge in choice if edge.width or edge.height]
        for choice in choices
    )
    return paths[0], paths[1]


def _fits_map(path: CorridorPath, config: MapGenConfig) -> bool:
    return all(
        segment.fits_within(0, 0, config.map_width - 1, config.map_height - 1)
        for segment in path
    )


def route_corridor(
    config: MapGenConfig, rng: random.Random, origin: Rect, target: Rect
) -> CorridorPath:
    """
    Pick a corridor between two rooms.

    Returns:
        The corridor's segments, or an empty list when the chosen path would
        leave the map.
    """
    first, second = order_points(origin.center(), target.center())
    path = rng.choice(candidate_paths(first, second, config.corridor_thickness))
    if not _fits_map(path, config):
        logger.debug("Skipped corridor %s -> %s: leaves the map", first, second)
        return []
    return path


def connect_rooms(
    config: MapGenConfig, rng: random.Random, rooms: Sequence[Rect]
) -> List[Rect]:
    """
    Connect every room to between 1 and ``room_max_connections`` others.

    Pairs are picked from each room's side, so the same two rooms may end up
    joined twice. Pairs that cannot be routed inside the map are dropped.

    Returns:
        All corridor segments, in the order they were routed.
    """
    corridors: List[Rect] = []

    for origin_index, origin in enumerate(rooms):
        count = rng.randint(1, config.room_max_connections)
        others = [room for i, room in enumerate(rooms) if i != origin_index]
        rng.shuffle(others)

        for target in others[:count]:
            corridors.extend(route_corridor(config, rng, origin, target))

    return corridors
