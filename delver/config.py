"""
Map generation settings.
"""

from dataclasses import dataclass

# Default screen the dungeon is laid out for, in tiles
DEFAULT_MAP_WIDTH: int = 80
DEFAULT_MAP_HEIGHT: int = 50

# Default sight radius for anything with a viewshed
DEFAULT_SIGHT_RANGE: int = 8

# Smallest room extent (x2 - x1) that still leaves a floor tile inside
MIN_ROOM_SIZE: int = 2


@dataclass(frozen=True)
class MapGenConfig:
    """
    Parameters for room placement and corridor routing.

    Room placement bounds (min_x..max_x, min_y..max_y) are inclusive tile
    coordinates and must lie inside the map.
    """

    num_rooms: int = 10
    min_room_width: int = 4
    max_room_width: int = 10
    min_room_height: int = 4
    max_room_height: int = 10
    min_x: int = 1
    max_x: int = DEFAULT_MAP_WIDTH - 2
    min_y: int = 1
    max_y: int = DEFAULT_MAP_HEIGHT - 2
    corridor_thickness: int = 1
    room_max_connections: int = 2

    map_width: int = DEFAULT_MAP_WIDTH
    map_height: int = DEFAULT_MAP_HEIGHT

    # Candidate rectangles tried before room placement gives up
    max_placement_attempts: int = 10_000

    def __post_init__(self) -> None:
        if self.num_rooms < 1:
            raise ValueError("num_rooms must be at least 1")
        # A room needs at least one floor tile inside its walls
        if not MIN_ROOM_SIZE <= self.min_room_width <= self.max_room_width:
            raise ValueError(f"room widths must satisfy {MIN_ROOM_SIZE} <= min <= max")
        if not MIN_ROOM_SIZE <= self.min_room_height <= self.max_room_height:
            raise ValueError(f"room heights must satisfy {MIN_ROOM_SIZE} <= min <= max")
        if self.max_x - self.min_x < self.max_room_width:
            raise ValueError("placement bounds are narrower than max_room_width")
        if self.max_y - self.min_y < self.max_room_height:
            raise ValueError("placement bounds are shorter than max_room_height")
        if self.min_x < 0 or self.min_y < 0:
            raise ValueError("placement bounds must not be negative")
        if self.max_x >= self.map_width or self.max_y >= self.map_height:
            raise ValueError("placement bounds must lie inside the map")
        if self.corridor_thickness < 1:
            raise ValueError("corridor_thickness must be at least 1")
        if self.room_max_connections < 1:
            raise ValueError("room_max_connections must be at least 1")
        if self.max_placement_attempts < self.num_rooms:
            raise ValueError("max_placement_attempts must be at least num_rooms")


def default_map_config() -> MapGenConfig:
    """The configuration used for a standard 80x50 level."""
    return MapGenConfig()
