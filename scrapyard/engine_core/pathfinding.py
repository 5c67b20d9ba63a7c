"""
Pathfinding - Bounded breadth-first search over walkable tiles.

The grid is unbounded, so the search stops after a fixed number of node
expansions. An unreachable or too-distant goal yields None, which callers
treat as "no path" rather than an error.
"""

from __future__ import annotations
from collections import deque
from typing import Callable

from loguru import logger

from .state import Position, WorldConfig
from .world import is_walkable


MAX_EXPANSIONS = 1000


def find_path(
    start: Position,
    goal: Position,
    config: WorldConfig,
    max_expansions: int = MAX_EXPANSIONS,
    walkable: Callable[[Position], bool] | None = None,
) -> list[Position] | None:
    """
    Shortest 4-connected path from start to goal.

    The returned path excludes start and includes goal, so
    find_path(a, a) == []. Returns None when the goal is not reached
    within max_expansions expansions.

    walkable overrides the terrain predicate (used for custom maps in tests).
    """
    if start == goal:
        return []

    passable = walkable or (lambda pos: is_walkable(pos, config))

    queue: deque[Position] = deque([start])
    came_from: dict[str, Position | None] = {start.key: None}
    expansions = 0

    while queue:
        if expansions >= max_expansions:
            break
        current = queue.popleft()
        expansions += 1

        for neighbor in current.neighbors():
            key = neighbor.key
            if key in came_from or not passable(neighbor):
                continue
            came_from[key] = current
            if neighbor == goal:
                return _reconstruct(came_from, goal)
            queue.append(neighbor)

    logger.debug(
        "No path from {} to {} after {} expansions", start.key, goal.key, expansions
    )
    return None


def _reconstruct(came_from: dict[str, Position | None], goal: Position) -> list[Position]:
    path = [goal]
    step = came_from[goal.key]
    while step is not None and came_from[step.key] is not None:
        path.append(step)
        step = came_from[step.key]
    path.reverse()
    return path
