from typing import Any, Dict, Iterator, List, Optional

from .entities import Entity
from .event_system import Event, EventBus
from .level_map import LevelMap
from .spatial_index import rebuild_index
from .visibility import OverlayPolicy, update_viewsheds


class Level:
    """
    Everything that lives for exactly one dungeon level.

    The map and the entity roster are owned here and handed to each pass
    explicitly; nothing is kept in module globals.
    """

    def __init__(
        self,
        level_map: LevelMap,
        entities: Optional[List[Entity]] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.map: LevelMap = level_map
        self.entities: List[Entity] = list(entities or [])
        self.event_bus: Optional[EventBus] = event_bus

    @property
    def depth(self) -> int:
        return self.map.depth

    def emit(self, event: Event, **kwargs: Any) -> None:
        """Emit an event if an event bus is configured."""
        if self.event_bus:
            self.event_bus.emit(event, **kwargs)

    def add_entity(self, entity: Entity) -> None:
        if self.get_entity(entity.entity_id) is not None:
            raise ValueError(f"Entity {entity.entity_id} is already on this level")
        self.entities.append(entity)

    def remove_entity(self, entity_id: int) -> bool:
        """
        Remove an entity by its id.

        Returns True if an entity was removed, False if no entity with that id
        was found.
        """
        for i, entity in enumerate(self.entities):
            if entity.entity_id == entity_id:
                self.entities.pop(i)
                return True
        return False

    def get_entity(self, entity_id: int) -> Optional[Entity]:
        for entity in self.entities:
            if entity.entity_id == entity_id:
                return entity
        return None

    def players(self) -> Iterator[Entity]:
        return (entity for entity in self.entities if entity.is_player)

    def player(self) -> Optional[Entity]:
        """The first player-tagged entity, or None."""
        return next(self.players(), None)

    def entities_at(self, x: int, y: int) -> List[Entity]:
        """Entities on a tile according to the last index rebuild."""
        by_id: Dict[int, Entity] = {e.entity_id: e for e in self.entities}
        return [
            by_id[entity_id]
            for entity_id in self.map.occupants_at(x, y)
            if entity_id in by_id
        ]

    def rebuild_index(self) -> None:
        rebuild_index(self.map, self.entities)

    def update_visibility(
        self, overlay: OverlayPolicy = OverlayPolicy.LAST_PLAYER
    ) -> None:
        update_viewsheds(self.map, self.entities, overlay=overlay)

    def reveal_map(self) -> None:
        self.map.reveal_all()
        self.emit(Event.MAP_REVEALED)
