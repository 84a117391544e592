"""
Entities as seen by the map systems.

Storage and registration of entities belong to the caller; the systems here
only read positions and capability flags, and the movement passes update
positions.
"""

from dataclasses import dataclass, field
from typing import Optional, Set, Tuple

from .config import DEFAULT_SIGHT_RANGE


@dataclass
class Viewshed:
    """The tiles an entity can currently see."""

    range: int = DEFAULT_SIGHT_RANGE
    # Set whenever the entity moves; the visibility pass clears it
    dirty: bool = True
    visible_tiles: Set[Tuple[int, int]] = field(default_factory=set)

    def can_see(self, x: int, y: int) -> bool:
        return (x, y) in self.visible_tiles


@dataclass
class Entity:
    """
    Anything standing on the map.

    Capabilities are plain flags rather than component types, so every pass
    can check them directly.
    """

    entity_id: int
    x: int
    y: int
    name: str = ""

    blocks_tile: bool = False  # nothing else may step onto this tile
    is_player: bool = False  # drives the shared revealed/visible overlay
    is_monster: bool = False  # handled by the monster AI pass
    is_mobile: bool = False  # may walk toward the player
    is_combatant: bool = False  # can be the target of a melee attack

    viewshed: Optional[Viewshed] = None

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def move_to(self, x: int, y: int) -> None:
        """Place the entity on a new tile and mark its view for recompute."""
        self.x = x
        self.y = y
        if self.viewshed is not None:
            self.viewshed.dirty = True
