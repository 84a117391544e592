"""Unit tests for the pathfinding adapter and A* search."""

import numpy as np
import pytest

from delver.level_map import LevelMap, TileType
from delver.pathfinding import (
    CARDINAL_COST,
    DIAGONAL_COST,
    GRAPH_CARDINAL,
    GRAPH_DIAGONAL,
    PathfindingAdapter,
    a_star_search,
)
from delver.spatial_index import rebuild_index


def make_open_map(width: int = 10, height: int = 10) -> LevelMap:
    """An all-floor map with its blocking layer built."""
    level_map = LevelMap(width, height)
    level_map.tiles[:, :] = TileType.FLOOR
    rebuild_index(level_map, [])
    return level_map


def assert_contiguous(adapter: PathfindingAdapter, steps):
    """Each step is at most one tile (including diagonals) from the previous."""
    for a, b in zip(steps, steps[1:]):
        ax, ay = adapter.index_to_point(a)
        bx, by = adapter.index_to_point(b)
        assert max(abs(ax - bx), abs(ay - by)) == 1


class TestPathfindingAdapter:
    """Tests for the grid adapter."""

    def test_dimensions_and_index_mapping(self):
        adapter = PathfindingAdapter(make_open_map(12, 7))
        assert adapter.dimensions == (12, 7)
        assert adapter.point_to_index(3, 2) == 27
        assert adapter.index_to_point(27) == (3, 2)

    def test_distance_is_euclidean(self):
        adapter = PathfindingAdapter(make_open_map())
        start = adapter.point_to_index(0, 0)
        end = adapter.point_to_index(3, 4)
        assert adapter.distance(start, end) == pytest.approx(5.0)

    def test_opacity_follows_tiles(self):
        level_map = make_open_map()
        level_map.tiles[0, 1] = TileType.WALL
        level_map.tiles[0, 2] = TileType.CORRIDOR_WALL
        adapter = PathfindingAdapter(level_map)
        assert adapter.is_opaque(1)
        assert not adapter.is_opaque(2)
        assert not adapter.is_opaque(3)

    def test_corner_exits(self):
        """A corner tile has three neighbours, the diagonal one costing more."""
        adapter = PathfindingAdapter(make_open_map())
        exits = dict(adapter.get_available_exits(0))
        assert exits == {
            1: CARDINAL_COST,
            10: CARDINAL_COST,
            11: DIAGONAL_COST,
        }

    def test_blocked_tiles_are_not_exits(self):
        level_map = make_open_map()
        level_map.tiles[1, :] = TileType.WALL
        rebuild_index(level_map, [])
        adapter = PathfindingAdapter(level_map)
        assert [idx for idx, _ in adapter.get_available_exits(0)] == [1]

    def test_exit_off_the_map_is_invalid(self):
        adapter = PathfindingAdapter(make_open_map())
        assert not adapter.is_exit_valid(-1, 0)
        assert not adapter.is_exit_valid(0, 10)
        assert adapter.is_exit_valid(9, 9)


class TestAStarSearch:
    """Tests for a_star_search."""

    def test_open_map_diagonal(self):
        """Corner to corner on an open map takes the straight diagonal."""
        adapter = PathfindingAdapter(make_open_map())

        path = a_star_search(0, 99, adapter)

        assert path.success
        assert len(path.steps) == 10
        assert path.steps[0] == 0
        assert path.steps[-1] == 99
        assert_contiguous(adapter, path.steps)

    def test_straight_line(self):
        adapter = PathfindingAdapter(make_open_map())
        start = adapter.point_to_index(2, 5)
        end = adapter.point_to_index(7, 5)

        path = a_star_search(start, end, adapter)

        assert path.success
        assert len(path.steps) == 6
        assert [adapter.index_to_point(i) for i in path.steps] == [
            (2, 5), (3, 5), (4, 5), (5, 5), (6, 5), (7, 5)
        ]

    def test_goes_around_pillar(self):
        level_map = make_open_map()
        level_map.tiles[5, 4] = TileType.WALL
        rebuild_index(level_map, [])
        adapter = PathfindingAdapter(level_map)
        start = adapter.point_to_index(2, 5)
        end = adapter.point_to_index(7, 5)

        path = a_star_search(start, end, adapter)

        assert path.success
        assert adapter.point_to_index(4, 5) not in path.steps
        assert path.steps[-1] == end
        assert_contiguous(adapter, path.steps)

    def test_wall_across_map_means_no_path(self):
        """An unreachable goal is a normal, unsuccessful result."""
        level_map = make_open_map()
        level_map.tiles[:, 5] = TileType.WALL
        rebuild_index(level_map, [])
        adapter = PathfindingAdapter(level_map)

        path = a_star_search(0, 99, adapter)

        assert not path.success
        assert path.steps == []

    def test_start_equals_end(self):
        adapter = PathfindingAdapter(make_open_map())
        path = a_star_search(42, 42, adapter)
        assert path.success
        assert path.steps == [42]

    def test_occupied_start_and_end_are_enterable(self):
        """Mover and target usually block their own tiles; the search ignores that."""
        level_map = make_open_map()
        level_map.blocked[0, 0] = True
        level_map.blocked[0, 5] = True
        adapter = PathfindingAdapter(level_map)

        path = a_star_search(0, 5, adapter)

        assert path.success
        assert path.steps[0] == 0
        assert path.steps[-1] == 5

    def test_blocked_override_is_used(self):
        """A caller-supplied blocking layer replaces the map's."""
        level_map = make_open_map()
        adapter = PathfindingAdapter(level_map)
        override = np.zeros_like(level_map.blocked)
        override[:, 5] = True

        assert not a_star_search(0, 99, adapter, blocked=override).success
        assert a_star_search(0, 99, adapter).success

    def test_search_does_not_modify_map(self):
        level_map = make_open_map()
        level_map.blocked[0, 0] = True
        before = level_map.blocked.copy()

        a_star_search(0, 99, PathfindingAdapter(level_map))

        assert np.array_equal(level_map.blocked, before)

    def test_search_weights_match_exit_costs(self):
        """The search prices steps the same way get_available_exits does."""
        assert GRAPH_DIAGONAL / GRAPH_CARDINAL == pytest.approx(DIAGONAL_COST / CARDINAL_COST)

    def test_every_step_is_an_available_exit(self):
        level_map = make_open_map()
        level_map.tiles[2:8, 5] = TileType.WALL
        rebuild_index(level_map, [])
        adapter = PathfindingAdapter(level_map)
        start = adapter.point_to_index(2, 5)
        end = adapter.point_to_index(8, 5)

        path = a_star_search(start, end, adapter)

        assert path.success
        for a, b in zip(path.steps, path.steps[1:]):
            assert b in dict(adapter.get_available_exits(a))
