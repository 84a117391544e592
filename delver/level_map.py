"""
Tile grid for a single dungeon level.

The grid is stored as numpy arrays of shape (height, width) so that
``array[y, x]`` addresses a tile and the C-order flattening gives the
row-major index ``y * width + x`` used by the pathfinding and spatial index.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple

import numpy as np


class TileType(IntEnum):
    """What a single grid cell is made of."""

    WALL = 0  # room border
    CORRIDOR_WALL = 1  # corridor border
    FLOOR = 2
    EMPTY = 3  # never painted


# Tiles that stop movement regardless of who stands on them
BLOCKING_TILES = (TileType.WALL, TileType.CORRIDOR_WALL)

# Tiles that stop line of sight
OPAQUE_TILES = (TileType.WALL,)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle, inclusive of both corners."""

    x1: int
    y1: int
    x2: int
    y2: int

    def __post_init__(self) -> None:
        if self.x2 < self.x1 or self.y2 < self.y1:
            raise ValueError(f"Malformed rectangle {self}")

    @classmethod
    def with_size(cls, x: int, y: int, width: int, height: int) -> "Rect":
        return cls(x, y, x + width, y + height)

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1

    def intersects(self, other: "Rect") -> bool:
        """True if the rectangles overlap or touch."""
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def center(self) -> Tuple[int, int]:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def fits_within(self, min_x: int, min_y: int, max_x: int, max_y: int) -> bool:
        """True if every corner lies inside the given inclusive bounds."""
        return (
            self.x1 >= min_x
            and self.y1 >= min_y
            and self.x2 <= max_x
            and self.y2 <= max_y
        )

    def expand(self, amount: int) -> "Rect":
        """Grow the rectangle outward by ``amount`` on every side."""
        return Rect(
            self.x1 - amount, self.y1 - amount, self.x2 + amount, self.y2 + amount
        )


@dataclass(eq=False)
class LevelMap:
    """
    The tile grid and its per-tile layers for one level.

    ``tiles`` is static after generation (apart from door insertion).
    ``blocked`` and ``occupants`` are rebuilt every turn by the spatial index,
    ``visible`` by the visibility pass. ``revealed`` only ever accumulates.
    """

    width: int
    height: int
    depth: int = 0
    rooms: List[Rect] = field(default_factory=list)

    tiles: np.ndarray = field(init=False, repr=False)
    revealed: np.ndarray = field(init=False, repr=False)
    visible: np.ndarray = field(init=False, repr=False)
    blocked: np.ndarray = field(init=False, repr=False)
    occupants: List[List[int]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Map must have positive size, got {self.width}x{self.height}")
        shape = (self.height, self.width)
        self.tiles = np.full(shape, TileType.EMPTY, dtype=np.int8)
        self.revealed = np.zeros(shape, dtype=bool)
        self.visible = np.zeros(shape, dtype=bool)
        self.blocked = np.zeros(shape, dtype=bool)
        self.occupants = [[] for _ in range(self.width * self.height)]

    @property
    def tile_count(self) -> int:
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def xy_idx(self, x: int, y: int) -> int:
        """
        Convert a coordinate to a flat tile index.

        Raises:
            IndexError: If (x, y) lies outside the map. Callers are expected
                to stay in bounds; nothing here clamps.
        """
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside the {self.width}x{self.height} map")
        return y * self.width + x

    def idx_xy(self, idx: int) -> Tuple[int, int]:
        """Convert a flat tile index back to (x, y)."""
        if not 0 <= idx < self.tile_count:
            raise IndexError(f"Tile index {idx} is outside [0, {self.tile_count})")
        y, x = divmod(idx, self.width)
        return (x, y)

    def tile_at(self, x: int, y: int) -> TileType:
        return TileType(int(self.tiles[y, x]))

    def is_opaque(self, x: int, y: int) -> bool:
        return self.tiles[y, x] in OPAQUE_TILES

    def is_blocked(self, x: int, y: int) -> bool:
        return bool(self.blocked[y, x])

    def tile_sequence(self) -> List[TileType]:
        """The tiles as a row-major list, index ``y * width + x``."""
        return [TileType(int(t)) for t in self.tiles.ravel()]

    def occupants_at(self, x: int, y: int) -> List[int]:
        return self.occupants[self.xy_idx(x, y)]

    def reveal_all(self) -> None:
        """Mark every tile as revealed (debug map reveal)."""
        self.revealed[:, :] = True
