"""
World Oracle - Deterministic terrain and POI generation.

The world is infinite and never stored. Every tile is a pure function of
its coordinates and the game's WorldConfig, so any window of the map can
be regenerated on demand and two calls always agree.

Terrain hash:  frac(sin(x * 12.9898 + y * 78.233) * 43758.5453)
POI hash:      frac(cos(x * 43.234 + y * 12.123) * 91238.123)
"""

from __future__ import annotations
import math
from typing import Iterable

from .state import POI, Position, Terrain, WorldConfig


# Tiles within these per-axis radii are forced clear
ORIGIN_SAFE_RADIUS = 2
POD_SAFE_RADIUS = 3

# No random POIs strictly inside these per-axis radii
SPAWN_CLEAR_RADIUS = 5
POD_CLEAR_RADIUS = 5

WALL_THRESHOLD = 0.85
DEBRIS_THRESHOLD = 0.80
ACID_THRESHOLD = 0.03

CACHE_THRESHOLD = 0.985
DERELICT_THRESHOLD = 0.975
NPC_THRESHOLD = 0.970


def _frac(value: float) -> float:
    return value - math.floor(value)


def terrain_hash(x: int, y: int) -> float:
    return _frac(math.sin(x * 12.9898 + y * 78.233) * 43758.5453)


def poi_hash(x: int, y: int) -> float:
    return _frac(math.cos(x * 43.234 + y * 12.123) * 91238.123)


def _within(x: int, y: int, center: Position, radius: int) -> bool:
    return abs(x - center.x) <= radius and abs(y - center.y) <= radius


def terrain_at(x: int, y: int, config: WorldConfig) -> Terrain:
    """Terrain of a tile. Safe zones around the origin and the pod are always floor."""
    if _within(x, y, config.origin, ORIGIN_SAFE_RADIUS):
        return Terrain.FLOOR
    if _within(x, y, config.pod, POD_SAFE_RADIUS):
        return Terrain.FLOOR

    h = terrain_hash(x, y)
    if h > WALL_THRESHOLD:
        return Terrain.WALL
    if h > DEBRIS_THRESHOLD:
        return Terrain.DEBRIS
    if h < ACID_THRESHOLD:
        return Terrain.ACID_POOL
    return Terrain.FLOOR


def poi_at(x: int, y: int, config: WorldConfig) -> POI:
    """
    Point of interest on a tile.

    POD and GUARDIAN sit at fixed coordinates. Random POIs only appear on
    floor tiles away from the spawn and pod areas.
    """
    if x == config.pod.x and y == config.pod.y:
        return POI.POD
    guardian = config.guardian
    if x == guardian.x and y == guardian.y:
        return POI.GUARDIAN

    if terrain_at(x, y, config) != Terrain.FLOOR:
        return POI.NONE
    if abs(x - config.origin.x) < SPAWN_CLEAR_RADIUS and abs(y - config.origin.y) < SPAWN_CLEAR_RADIUS:
        return POI.NONE
    if abs(x - config.pod.x) < POD_CLEAR_RADIUS and abs(y - config.pod.y) < POD_CLEAR_RADIUS:
        return POI.NONE

    g = poi_hash(x, y)
    if g > CACHE_THRESHOLD:
        return POI.CACHE
    if g > DERELICT_THRESHOLD:
        return POI.DERELICT
    if g > NPC_THRESHOLD:
        return POI.NPC
    return POI.NONE


def is_walkable(pos: Position, config: WorldConfig) -> bool:
    return terrain_at(pos.x, pos.y, config) != Terrain.WALL


# ============================================================================
# ASCII rendering
# ============================================================================

TERRAIN_GLYPHS = {
    Terrain.FLOOR: ".",
    Terrain.WALL: "#",
    Terrain.DEBRIS: ",",
    Terrain.ACID_POOL: "~",
}

POI_GLYPHS = {
    POI.CACHE: "C",
    POI.DERELICT: "D",
    POI.NPC: "N",
    POI.POD: "P",
    POI.GUARDIAN: "G",
}


def render_window(
    config: WorldConfig,
    center: Position,
    radius: int = 10,
    player: Position | None = None,
    visited: Iterable[str] = (),
) -> str:
    """
    Render a square window of the world as text.

    Visited POIs are drawn in lowercase, the player as '@'.
    """
    visited_keys = set(visited)
    rows = []
    for y in range(center.y - radius, center.y + radius + 1):
        row = []
        for x in range(center.x - radius, center.x + radius + 1):
            if player is not None and player.x == x and player.y == y:
                row.append("@")
                continue
            poi = poi_at(x, y, config)
            if poi != POI.NONE:
                glyph = POI_GLYPHS[poi]
                if Position(x, y).key in visited_keys:
                    glyph = glyph.lower()
                row.append(glyph)
            else:
                row.append(TERRAIN_GLYPHS[terrain_at(x, y, config)])
        rows.append("".join(row))
    return "\n".join(rows)
