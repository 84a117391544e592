"""
Monster turn: spot the player, declare attacks, and close in.
"""

import logging

from .event_system import Event
from .pathfinding import PathfindingAdapter, a_star_search
from .world import Level

logger = logging.getLogger(__name__)

# Anything closer than this (including diagonal neighbours) is in melee reach
MELEE_RANGE: float = 1.5


def run_monster_ai(level: Level) -> int:
    """
    Let every monster that can see the player react to it.

    A monster next to the player declares a melee attack. A mobile monster
    also walks one step along the shortest path toward the player, as long
    as that step does not land on the player.

    Steps are tracked in a private copy of the blocking layer so two monsters
    never move onto the same tile; the map's own ``blocked`` is left for the
    next index rebuild.

    Returns:
        Number of monsters that moved.
    """
    player = level.player()
    if player is None:
        return 0

    adapter = PathfindingAdapter(level.map)
    reserved = level.map.blocked.copy()
    player_idx = adapter.point_to_index(player.x, player.y)
    moved = 0

    for monster in level.entities:
        if not monster.is_monster or monster.viewshed is None:
            continue
        if not monster.viewshed.can_see(player.x, player.y):
            continue

        logger.debug("%s leers at the player", monster.name or monster.entity_id)
        level.emit(Event.PLAYER_SPOTTED, entity_id=monster.entity_id, name=monster.name)

        start = adapter.point_to_index(monster.x, monster.y)
        distance = adapter.distance(start, player_idx)
        if distance < MELEE_RANGE:
            level.emit(
                Event.MELEE_INTENT,
                attacker_id=monster.entity_id,
                target_id=player.entity_id,
            )

        if not monster.is_mobile:
            continue

        path = a_star_search(start, player_idx, adapter, blocked=reserved)
        if not path.success or len(path.steps) <= 2:
            continue

        next_x, next_y = adapter.index_to_point(path.steps[1])
        if monster.blocks_tile:
            reserved[monster.y, monster.x] = False
            reserved[next_y, next_x] = True
        monster.move_to(next_x, next_y)
        moved += 1
        level.emit(Event.ENTITY_MOVED, entity_id=monster.entity_id, x=next_x, y=next_y)

    return moved
