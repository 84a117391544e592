"""
Initial entity placement for a freshly generated level.
"""

import itertools
import random
from typing import List

from .config import DEFAULT_SIGHT_RANGE
from .entities import Entity, Viewshed
from .level_map import LevelMap, TileType

MONSTER_NAMES = ("goblin", "orc")
SPAWNER_NAMES = ("orc spawner", "cow spawner")


def spawn_entities(
    level_map: LevelMap,
    rng: random.Random,
    sight_range: int = DEFAULT_SIGHT_RANGE,
) -> List[Entity]:
    """
    Create the player and the monsters for a level.

    The player starts at the center of the first room. Every other room gets
    a mobile monster at its center and, if the tile up and to the left of the
    center is floor, an immobile spawner there.

    Raises:
        ValueError: If the map has no rooms.
    """
    if not level_map.rooms:
        raise ValueError("Cannot place entities on a map without rooms")

    ids = itertools.count()
    start_x, start_y = level_map.rooms[0].center()
    entities = [
        Entity(
            entity_id=next(ids),
            x=start_x,
            y=start_y,
            name="player",
            blocks_tile=True,
            is_player=True,
            is_combatant=True,
            viewshed=Viewshed(range=sight_range),
        )
    ]

    for number, room in enumerate(level_map.rooms[1:], start=1):
        x, y = room.center()
        entities.append(
            Entity(
                entity_id=next(ids),
                x=x,
                y=y,
                name=f"{rng.choice(MONSTER_NAMES)} #{number}",
                blocks_tile=True,
                is_monster=True,
                is_mobile=True,
                is_combatant=True,
                viewshed=Viewshed(range=sight_range),
            )
        )

        spawner_x, spawner_y = x - 1, y - 1
        if (
            level_map.in_bounds(spawner_x, spawner_y)
            and level_map.tile_at(spawner_x, spawner_y) == TileType.FLOOR
        ):
            entities.append(
                Entity(
                    entity_id=next(ids),
                    x=spawner_x,
                    y=spawner_y,
                    name=rng.choice(SPAWNER_NAMES),
                    blocks_tile=True,
                    is_monster=True,
                    is_combatant=True,
                    viewshed=Viewshed(range=sight_range),
                )
            )

    return entities
