"""Tests for level bookkeeping and the turn state machine."""

import random

import pytest

from delver.entities import Entity, Viewshed
from delver.event_system import Event, EventBus, EventData
from delver.level_map import LevelMap, TileType
from delver.state import Game, MoveCommand, RevealMapCommand, RunState
from delver.world import Level


def make_game(seed: int = 3):
    bus = EventBus()
    received = []

    def record(event_data: EventData) -> None:
        received.append(event_data)

    for event in (Event.LEVEL_START, Event.LEVEL_END, Event.MAP_REVEALED):
        bus.subscribe(event, record)

    game = Game(rng=random.Random(seed), event_bus=bus)
    return game, received


class TestLevel:
    """Tests for the per-level entity roster."""

    def test_add_and_get(self):
        level = Level(LevelMap(5, 5))
        entity = Entity(entity_id=3, x=1, y=1)
        level.add_entity(entity)
        assert level.get_entity(3) is entity
        assert level.get_entity(4) is None

    def test_duplicate_id_rejected(self):
        level = Level(LevelMap(5, 5), [Entity(entity_id=3, x=1, y=1)])
        with pytest.raises(ValueError):
            level.add_entity(Entity(entity_id=3, x=2, y=2))

    def test_remove_entity(self):
        level = Level(LevelMap(5, 5), [Entity(entity_id=3, x=1, y=1)])
        assert level.remove_entity(3)
        assert not level.remove_entity(3)

    def test_entities_at_uses_index(self):
        entity = Entity(entity_id=3, x=1, y=2)
        level = Level(LevelMap(5, 5), [entity])
        assert level.entities_at(1, 2) == []
        level.rebuild_index()
        assert level.entities_at(1, 2) == [entity]


class TestGame:
    """Tests for Game.tick and Game.descend."""

    def test_starts_at_depth_zero(self):
        game, received = make_game()
        assert game.run_state is RunState.PRE_RUN
        assert game.level.depth == 0
        assert game.level.player() is not None
        assert received[0].event is Event.LEVEL_START
        assert received[0].kwargs == {"depth": 0}

    def test_pre_run_computes_first_view(self):
        game, _ = make_game()
        assert game.tick() is RunState.AWAITING_INPUT
        player = game.level.player()
        assert game.level.map.visible[player.y, player.x]
        assert game.level.map.blocked[player.y, player.x]

    def test_waits_for_input(self):
        game, _ = make_game()
        game.tick()
        assert game.tick() is RunState.AWAITING_INPUT
        assert game.tick(None) is RunState.AWAITING_INPUT

    def test_full_turn_cycle(self):
        game, _ = make_game()
        game.tick()

        assert game.tick(MoveCommand(1, 0)) is RunState.PLAYER_TURN
        assert game.tick() is RunState.MONSTER_TURN
        assert game.tick() is RunState.AWAITING_INPUT

    def test_revealed_grows_monotonically_over_turns(self):
        game, _ = make_game()
        game.tick()
        previous = game.level.map.revealed.copy()
        for dx, dy in [(1, 0), (1, 0), (0, 1), (-1, 0)]:
            game.tick(MoveCommand(dx, dy))
            game.tick()
            game.tick()
            revealed = game.level.map.revealed
            assert revealed[previous].all()
            assert revealed[game.level.map.visible].all()
            previous = revealed.copy()

    def test_reveal_map(self):
        game, received = make_game()
        game.tick()

        assert game.tick(RevealMapCommand()) is RunState.REVEAL_MAP
        assert game.tick() is RunState.AWAITING_INPUT

        assert game.level.map.revealed.all()
        assert received[-1].event is Event.MAP_REVEALED

    def test_descend(self):
        game, received = make_game()
        game.tick()
        first_level = game.level

        level = game.descend()

        assert level is game.level
        assert level is not first_level
        assert level.depth == 1
        assert game.run_state is RunState.PRE_RUN
        assert [(d.event, d.kwargs) for d in received] == [
            (Event.LEVEL_START, {"depth": 0}),
            (Event.LEVEL_END, {"depth": 0}),
            (Event.LEVEL_START, {"depth": 1}),
        ]

    def test_game_over_without_player(self):
        game, _ = make_game()
        game.tick()
        game.level.remove_entity(game.level.player().entity_id)

        assert game.tick() is RunState.GAME_OVER
        assert game.tick(MoveCommand(1, 0)) is RunState.GAME_OVER

    def test_index_follows_monsters_after_monster_turn(self):
        """Back at AWAITING_INPUT, blocked and occupants show where monsters now stand."""
        game, _ = make_game()
        level_map = LevelMap(12, 12)
        level_map.tiles[:, :] = TileType.WALL
        level_map.tiles[1:-1, 1:-1] = TileType.FLOOR
        player = Entity(
            entity_id=0, x=2, y=5, blocks_tile=True, is_player=True,
            is_combatant=True, viewshed=Viewshed(),
        )
        monster = Entity(
            entity_id=1, x=8, y=5, blocks_tile=True, is_monster=True,
            is_mobile=True, is_combatant=True, viewshed=Viewshed(),
        )
        game.level = Level(level_map, [player, monster], game.event_bus)
        game.run_state = RunState.AWAITING_INPUT

        game.tick(MoveCommand(0, 0))
        game.tick()
        assert game.tick() is RunState.AWAITING_INPUT

        assert monster.position == (7, 5)
        assert level_map.blocked[5, 7]
        assert not level_map.blocked[5, 8]
        assert level_map.occupants_at(7, 5) == [1]
        assert level_map.occupants_at(8, 5) == []
