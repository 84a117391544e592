"""
Turn sequencing.

A ``Game`` owns the current level and walks it through the run states:

    PRE_RUN -> AWAITING_INPUT -> PLAYER_TURN -> MONSTER_TURN -> AWAITING_INPUT ...

Within a turn the passes run strictly in order: spatial index rebuild,
visibility, then (on the monster turn) monster AI and its movement. Decoding
keys into commands is up to the caller.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

from .config import MapGenConfig, default_map_config
from .dungeon_gen import generate_level
from .event_system import Event, EventBus
from .monster_ai import run_monster_ai
from .player import try_move_player
from .spawning import spawn_entities
from .visibility import OverlayPolicy
from .world import Level

logger = logging.getLogger(__name__)


class RunState(Enum):
    PRE_RUN = auto()
    # The player only declares intent here
    AWAITING_INPUT = auto()
    # Changes from the player's action propagate
    PLAYER_TURN = auto()
    MONSTER_TURN = auto()
    # Debug: reveal the whole map
    REVEAL_MAP = auto()
    GAME_OVER = auto()


@dataclass
class MoveCommand:
    """Step the player by (dx, dy); each delta is -1, 0 or 1."""

    dx: int
    dy: int


@dataclass
class RevealMapCommand:
    """Reveal every tile of the current level."""


Command = Union[MoveCommand, RevealMapCommand]


class Game:
    def __init__(
        self,
        config: Optional[MapGenConfig] = None,
        rng: Optional[random.Random] = None,
        event_bus: Optional[EventBus] = None,
        overlay: OverlayPolicy = OverlayPolicy.LAST_PLAYER,
    ) -> None:
        self.config: MapGenConfig = config or default_map_config()
        self.rng: random.Random = rng or random.Random()
        self.event_bus: EventBus = event_bus or EventBus()
        self.overlay: OverlayPolicy = overlay

        self.run_state: RunState = RunState.PRE_RUN
        self.level: Level = self._build_level(depth=0)
        self.event_bus.emit(Event.LEVEL_START, depth=0)

    def _build_level(self, depth: int) -> Level:
        level_map = generate_level(self.config, self.rng, depth=depth)
        entities = spawn_entities(level_map, self.rng)
        return Level(level_map, entities, self.event_bus)

    def run_systems(self) -> None:
        """Run one turn's worth of map passes, in order."""
        self.level.rebuild_index()
        self.level.update_visibility(self.overlay)
        if self.run_state is RunState.MONSTER_TURN:
            if run_monster_ai(self.level):
                # Monsters stepped using a private copy of the blocking layer
                self.level.rebuild_index()

    def tick(self, command: Optional[Command] = None) -> RunState:
        """
        Advance the state machine by one step.

        Args:
            command: The player's decoded input, if any. Only consulted
                while awaiting input.

        Returns:
            The new run state.
        """
        state = self.run_state

        if state is RunState.PRE_RUN:
            self.run_systems()
            state = RunState.AWAITING_INPUT
        elif state is RunState.AWAITING_INPUT:
            if isinstance(command, MoveCommand):
                # Monsters may have moved since the last rebuild
                self.level.rebuild_index()
                try_move_player(self.level, command.dx, command.dy)
                state = RunState.PLAYER_TURN
            elif isinstance(command, RevealMapCommand):
                state = RunState.REVEAL_MAP
        elif state is RunState.PLAYER_TURN:
            self.run_systems()
            state = RunState.MONSTER_TURN
        elif state is RunState.MONSTER_TURN:
            self.run_systems()
            state = RunState.AWAITING_INPUT
        elif state is RunState.REVEAL_MAP:
            self.level.reveal_map()
            state = RunState.AWAITING_INPUT

        if self.level.player() is None and state is not RunState.GAME_OVER:
            logger.info("No player left on depth %d", self.level.depth)
            state = RunState.GAME_OVER

        self.run_state = state
        return state

    def descend(self) -> Level:
        """Replace the current level with a fresh one, one level deeper."""
        depth = self.level.depth
        self.event_bus.emit(Event.LEVEL_END, depth=depth)
        self.level = self._build_level(depth=depth + 1)
        self.run_state = RunState.PRE_RUN
        self.event_bus.emit(Event.LEVEL_START, depth=depth + 1)
        return self.level
