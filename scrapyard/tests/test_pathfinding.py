"""
Tests for bounded BFS pathfinding.
"""

from ..engine_core.pathfinding import find_path
from ..engine_core.state import Position, Terrain
from ..engine_core.world import terrain_at


def open_field(pos):
    return True


class TestFindPath:
    """Tests for find_path."""

    def test_same_tile_is_empty_path(self, world):
        """Start equal to goal yields an empty path, not None."""
        assert find_path(Position(3, 3), Position(3, 3), world) == []

    def test_path_excludes_start_includes_goal(self, world):
        """The path starts one step away and ends on the goal."""
        start, goal = Position(0, 0), Position(3, 0)
        path = find_path(start, goal, world, walkable=open_field)

        assert path == [Position(1, 0), Position(2, 0), Position(3, 0)]

    def test_path_is_shortest_and_connected(self, world):
        """Inside the spawn safe zone the path is Manhattan length and 4-connected."""
        start, goal = Position(2, 2), Position(-2, -1)
        path = find_path(start, goal, world)

        assert len(path) == 7
        assert path[-1] == goal
        previous = start
        for step in path:
            assert abs(step.x - previous.x) + abs(step.y - previous.y) == 1
            assert terrain_at(step.x, step.y, world) != Terrain.WALL
            previous = step

    def test_walls_are_avoided(self, world):
        """A wall across the direct route forces a detour."""
        wall = {Position(1, y) for y in range(-1, 2)}
        path = find_path(
            Position(0, 0), Position(2, 0), world,
            walkable=lambda p: p not in wall,
        )

        assert path is not None
        assert not wall.intersection(path)
        assert len(path) == 6

    def test_enclosed_goal_returns_none(self, world):
        """A goal boxed in by walls is unreachable."""
        goal = Position(5, 5)
        box = set(goal.neighbors())
        path = find_path(
            Position(0, 0), goal, world,
            walkable=lambda p: p not in box,
        )
        assert path is None

    def test_expansion_budget(self, world):
        """Goals beyond the expansion budget are reported as unreachable."""
        assert find_path(Position(0, 0), Position(50, 0), world, max_expansions=10, walkable=open_field) is None
        assert find_path(Position(0, 0), Position(500, 500), world) is None

    def test_wall_goal_unreachable(self, world, tile_finder):
        """A wall tile can never be a destination."""
        wall = tile_finder.terrain(Terrain.WALL)
        start = wall.offset(-1, 0)
        assert find_path(start, wall, world) is None
