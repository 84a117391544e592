"""
Pathfinding algorithms for dungeon navigation.

``PathfindingAdapter`` describes the grid to the search: its size, how tile
coordinates map to flat indices, which tiles stop sight and which stop
movement. ``a_star_search`` runs tcod's A* over it.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
import tcod.path

from .level_map import OPAQUE_TILES, LevelMap

logger = logging.getLogger(__name__)

# Step costs for get_available_exits
CARDINAL_COST: float = 1.0
DIAGONAL_COST: float = 1.45

# tcod graphs take integer step weights; these are the costs above in
# hundredths, so the search and get_available_exits agree on every step
GRAPH_SCALE: int = 100
GRAPH_CARDINAL: int = round(CARDINAL_COST * GRAPH_SCALE)
GRAPH_DIAGONAL: int = round(DIAGONAL_COST * GRAPH_SCALE)

NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, 0), (1, 0), (0, -1), (0, 1),
    (-1, -1), (1, -1), (-1, 1), (1, 1),
)


@dataclass
class NavigationPath:
    """
    Result of a path query.

    ``steps`` runs from the start index to the end index, both included.
    A failed search is a normal result: ``success`` is False and ``steps``
    is empty.
    """

    success: bool = False
    steps: List[int] = field(default_factory=list)


class PathfindingAdapter:
    """
    Read-only view of a level map for searches and field of view.

    Sight uses the tile types (walls are opaque). Movement uses the map's
    ``blocked`` layer, so it is only as fresh as the last index rebuild.
    """

    def __init__(self, level_map: LevelMap) -> None:
        self.map = level_map

    @property
    def dimensions(self) -> Tuple[int, int]:
        return (self.map.width, self.map.height)

    def point_to_index(self, x: int, y: int) -> int:
        return self.map.xy_idx(x, y)

    def index_to_point(self, idx: int) -> Tuple[int, int]:
        return self.map.idx_xy(idx)

    def is_opaque(self, idx: int) -> bool:
        x, y = self.index_to_point(idx)
        return self.map.is_opaque(x, y)

    def is_exit_valid(self, x: int, y: int) -> bool:
        """True if (x, y) is on the map and nothing blocks it."""
        return self.map.in_bounds(x, y) and not self.map.is_blocked(x, y)

    def get_available_exits(self, idx: int) -> List[Tuple[int, float]]:
        """Neighbouring tiles that can be entered, with the cost of the step."""
        x, y = self.index_to_point(idx)
        exits: List[Tuple[int, float]] = []
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if self.is_exit_valid(nx, ny):
                cost = DIAGONAL_COST if dx and dy else CARDINAL_COST
                exits.append((self.map.xy_idx(nx, ny), cost))
        return exits

    def distance(self, idx1: int, idx2: int) -> float:
        """Straight-line distance between two tiles."""
        x1, y1 = self.index_to_point(idx1)
        x2, y2 = self.index_to_point(idx2)
        return math.hypot(x2 - x1, y2 - y1)

    def transparency(self) -> np.ndarray:
        """Boolean (height, width) array, True where sight passes."""
        return ~np.isin(self.map.tiles, OPAQUE_TILES)

    def movement_cost(self, blocked: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Integer (height, width) cost array for tcod: 1 to enter, 0 for blocked.

        Parameters:
            blocked: Blocking layer to use instead of the map's own, e.g. a
                copy a movement pass is updating as it goes.
        """
        if blocked is None:
            blocked = self.map.blocked
        return np.where(blocked, 0, 1).astype(np.int32)


def a_star_search(
    start: int,
    end: int,
    adapter: PathfindingAdapter,
    blocked: Optional[np.ndarray] = None,
) -> NavigationPath:
    """
    Find a shortest path between two tile indices, diagonal steps allowed.

    The start and end tiles are always treated as enterable, because they are
    usually occupied by the mover and its target.

    Args:
        start: Tile index to start from
        end: Tile index to reach
        adapter: The grid to search
        blocked: Optional blocking layer overriding the map's

    Returns:
        NavigationPath including both start and end, or a failed one if
        there is no route.
    """
    if start == end:
        return NavigationPath(success=True, steps=[start])

    start_x, start_y = adapter.index_to_point(start)
    end_x, end_y = adapter.index_to_point(end)

    cost = adapter.movement_cost(blocked)
    cost[start_y, start_x] = 1
    cost[end_y, end_x] = 1

    graph = tcod.path.SimpleGraph(cost=cost, cardinal=GRAPH_CARDINAL, diagonal=GRAPH_DIAGONAL)
    pathfinder = tcod.path.Pathfinder(graph)
    pathfinder.add_root((start_y, start_x))
    pathfinder.resolve((end_y, end_x))

    distance = pathfinder.distance
    if distance[end_y, end_x] == np.iinfo(distance.dtype).max:
        logger.debug("No path from %s to %s", (start_x, start_y), (end_x, end_y))
        return NavigationPath(success=False)

    raw_path = pathfinder.path_to((end_y, end_x)).tolist()
    steps = [adapter.point_to_index(x, y) for y, x in raw_path]
    return NavigationPath(success=True, steps=steps)
