"""
Pytest fixtures for Scrapyard tests.
"""

from typing import Callable

import pytest

from ..content import create_default_catalog, setup_game
from ..engine_core.catalog import Catalog
from ..engine_core.reducer import Reducer
from ..engine_core.state import Bot, BotClass, Enemy, GameState, Position, WorldConfig
from ..engine_core.world import poi_at, terrain_at
from .helpers import ScriptedRandom, find_tile


@pytest.fixture
def catalog() -> Catalog:
    """Default validated catalog."""
    return create_default_catalog()


@pytest.fixture
def world() -> WorldConfig:
    """World with the pod at a fixed spot (guardian at 30,27)."""
    return WorldConfig(pod=Position(30, 30))


@pytest.fixture
def state(catalog: Catalog, world: WorldConfig) -> GameState:
    """Fresh game at the start position, with a random source that never rolls encounters."""
    game = setup_game(random_seed=42, catalog=catalog, world=world)
    game.rng = ScriptedRandom(0.99)
    return game


@pytest.fixture
def reducer(catalog: Catalog) -> Reducer:
    return Reducer(catalog=catalog)


@pytest.fixture
def nanite() -> Enemy:
    """A TECH-class enemy with round numbers."""
    return Enemy(
        enemy_type="NANITE_SWARM",
        name="Nanite Swarm",
        enemy_class=BotClass.TECH,
        hp=100,
        max_hp=100,
        xp_value=50,
    )


@pytest.fixture
def make_bot() -> Callable[..., Bot]:
    """Factory for extra squad members."""

    def _make(bot_id: str, name: str, hp: int = 100, **kwargs) -> Bot:
        return Bot(
            id=bot_id,
            name=name,
            bot_class=kwargs.pop("bot_class", BotClass.TANK),
            hp=hp,
            base_max_hp=kwargs.pop("base_max_hp", 100),
            is_defeated=hp == 0,
            active_skills=kwargs.pop("active_skills", ["BASH", "HACK"]),
            **kwargs,
        )

    return _make


@pytest.fixture
def start_combat(reducer: Reducer) -> Callable[[GameState, Enemy], GameState]:
    """Put a state into combat against the given enemy."""

    def _start(game: GameState, enemy: Enemy) -> GameState:
        reducer.combat.start_encounter(game, enemy)
        game.events = []
        game.halt_travel = False
        return game

    return _start


@pytest.fixture
def tile_finder(world: WorldConfig):
    """Locates terrain and POIs in the fixed world."""

    class Finder:
        def terrain(self, terrain):
            return find_tile(lambda p: terrain_at(p.x, p.y, world) == terrain)

        def poi(self, poi):
            return find_tile(lambda p: poi_at(p.x, p.y, world) == poi)

    return Finder()
