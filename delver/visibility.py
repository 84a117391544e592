"""
Line of sight for everything with a viewshed.

Only dirty viewsheds are recomputed. Player viewsheds additionally drive the
map's shared ``visible`` and ``revealed`` layers, which the renderer reads.
"""

import logging
from enum import Enum, auto
from typing import Iterable, List, Set, Tuple

import numpy as np
import tcod.constants
import tcod.map

from .entities import Entity
from .level_map import LevelMap
from .pathfinding import PathfindingAdapter

logger = logging.getLogger(__name__)

FOV_ALGORITHM = tcod.constants.FOV_SYMMETRIC_SHADOWCAST


class OverlayPolicy(Enum):
    """How several player entities share the one revealed/visible overlay."""

    # Whichever player is processed last decides what is visible
    LAST_PLAYER = auto()
    # Every player's sight counts
    UNION = auto()


def field_of_view(
    adapter: PathfindingAdapter, x: int, y: int, radius: int
) -> np.ndarray:
    """
    Tiles visible from (x, y) within ``radius``.

    Walls stop sight but are themselves visible.

    Returns:
        Boolean (height, width) array.
    """
    return tcod.map.compute_fov(
        adapter.transparency(),
        (y, x),
        radius=radius,
        light_walls=True,
        algorithm=FOV_ALGORITHM,
    )


def _points(mask: np.ndarray) -> Set[Tuple[int, int]]:
    ys, xs = np.nonzero(mask)
    return set(zip(xs.tolist(), ys.tolist()))


def _points_to_mask(level_map: LevelMap, points: Iterable[Tuple[int, int]]) -> np.ndarray:
    mask = np.zeros((level_map.height, level_map.width), dtype=bool)
    for x, y in points:
        if level_map.in_bounds(x, y):
            mask[y, x] = True
    return mask


def update_viewsheds(
    level_map: LevelMap,
    entities: Iterable[Entity],
    overlay: OverlayPolicy = OverlayPolicy.LAST_PLAYER,
) -> None:
    """
    Recompute every dirty viewshed and refresh the player overlay.

    Under ``LAST_PLAYER`` each dirty player resets ``visible`` to its own
    view, so the last one processed wins. Under ``UNION`` the overlay becomes
    the union of all players' current views whenever any of them changed.
    ``revealed`` is only ever set, never cleared.
    """
    adapter = PathfindingAdapter(level_map)
    players: List[Entity] = []
    overlay_writers = 0

    for entity in entities:
        viewshed = entity.viewshed
        if viewshed is None:
            continue
        if entity.is_player:
            players.append(entity)
        if not viewshed.dirty:
            continue

        fov = field_of_view(adapter, entity.x, entity.y, viewshed.range)
        viewshed.visible_tiles = _points(fov)
        viewshed.dirty = False

        if entity.is_player:
            overlay_writers += 1
            if overlay is OverlayPolicy.LAST_PLAYER:
                level_map.visible[:, :] = fov
                level_map.revealed |= fov

    if overlay_writers > 1 and overlay is OverlayPolicy.LAST_PLAYER:
        logger.warning(
            "%d players updated the visible overlay in one pass; only the last one counts",
            overlay_writers,
        )

    if overlay is OverlayPolicy.UNION and overlay_writers:
        combined = np.zeros_like(level_map.visible)
        for player in players:
            combined |= _points_to_mask(level_map, player.viewshed.visible_tiles)
        level_map.visible[:, :] = combined
        level_map.revealed |= combined
