import logging

from .event_system import Event
from .world import Level

logger = logging.getLogger(__name__)


def try_move_player(level: Level, delta_x: int, delta_y: int) -> bool:
    """
    Move the player one step, or attack whatever fighter is in the way.

    The destination is clamped to the map. Occupants and blocking come from
    the last index rebuild, so rebuild before calling this.

    Returns:
        True if the player moved or declared an attack.
    """
    player = level.player()
    if player is None:
        return False

    level_map = level.map
    x = min(level_map.width - 1, max(0, player.x + delta_x))
    y = min(level_map.height - 1, max(0, player.y + delta_y))
    if (x, y) == player.position:
        return False

    for target in level.entities_at(x, y):
        if target.is_combatant and target is not player:
            level.emit(
                Event.MELEE_INTENT,
                attacker_id=player.entity_id,
                target_id=target.entity_id,
            )
            return True

    if level_map.is_blocked(x, y):
        logger.debug("Player bumped into blocked tile %s", (x, y))
        return False

    player.move_to(x, y)
    level.emit(Event.ENTITY_MOVED, entity_id=player.entity_id, x=x, y=y)
    return True
