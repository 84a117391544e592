"""Dungeon level generation, spatial indexing, line of sight and pathfinding."""

from delver.config import MapGenConfig, default_map_config
from delver.level_map import TileType, Rect, LevelMap
from delver.dungeon_gen import (
    RoomPlacementError,
    generate_rooms,
    paint,
    insert_doors,
    generate_level,
)
from delver.corridors import connect_rooms
from delver.entities import Entity, Viewshed
from delver.spatial_index import rebuild_index
from delver.visibility import OverlayPolicy, update_viewsheds
from delver.pathfinding import PathfindingAdapter, NavigationPath, a_star_search
from delver.event_system import Event, EventBus, EventData
from delver.world import Level
from delver.state import Game, RunState, MoveCommand, RevealMapCommand
