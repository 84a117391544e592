"""
Per-turn index of which tiles are blocked and who stands where.
"""

from typing import Iterable

import numpy as np

from .entities import Entity
from .level_map import BLOCKING_TILES, LevelMap


def populate_blocked(level_map: LevelMap) -> None:
    """Reset ``blocked`` to the terrain alone: walls block, nothing else does."""
    level_map.blocked[:, :] = np.isin(level_map.tiles, BLOCKING_TILES)


def clear_occupants(level_map: LevelMap) -> None:
    for occupants in level_map.occupants:
        occupants.clear()


def rebuild_index(level_map: LevelMap, entities: Iterable[Entity]) -> None:
    """
    Rebuild ``blocked`` and ``occupants`` from scratch.

    Nothing from the previous turn survives. Entities are listed on their
    tile in the order the roster yields them.

    Raises:
        IndexError: If an entity stands outside the map.
    """
    populate_blocked(level_map)
    clear_occupants(level_map)

    for entity in entities:
        idx = level_map.xy_idx(entity.x, entity.y)
        if entity.blocks_tile:
            level_map.blocked[entity.y, entity.x] = True
        level_map.occupants[idx].append(entity.entity_id)
