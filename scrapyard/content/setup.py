"""
Game Setup - Creates the initial game state.

This module handles:
- Seeding the game's random source for determinism
- Placing the escape pod (and so the guardian)
- The starter bot, starting position and inventory
"""

from __future__ import annotations
import random

from ..engine_core.catalog import Catalog
from ..engine_core.state import (
    Bot, BotClass, Facing, GameState, Player, Position, Severity, WorldConfig,
)
from .catalog import create_default_catalog


START_POSITION = Position(2, 2)
STARTING_REPAIR_KITS = 2
INTRO_MESSAGE = "CRITICAL ERROR... SYSTEM REBOOT... ESCAPE POD LOCATED."


def create_starter_bot() -> Bot:
    return Bot(
        id="starter_bot",
        name="Scout-01",
        bot_class=BotClass.SCOUT,
        hp=100,
        base_max_hp=100,
        active_skills=["LASER_SHOT", "HACK"],
        personality="Ready for duty.",
    )


def setup_game(
    random_seed: int | None = None,
    catalog: Catalog | None = None,
    world: WorldConfig | None = None,
) -> GameState:
    """
    Set up a new game.

    Args:
        random_seed: Seed for the game's random source
        catalog: Content catalog (creates default if not provided)
        world: World parameters (pod placed from the seed if not provided)

    Returns:
        Initial GameState, exploring at the start position
    """
    rng = random.Random(random_seed)
    game_catalog = catalog or create_default_catalog()
    world_config = world or WorldConfig.create(rng)

    player = Player(
        position=START_POSITION,
        facing=Facing.DOWN,
        team=[create_starter_bot()],
        inventory=[game_catalog.new_item("repair_kit", count=STARTING_REPAIR_KITS)],
    )
    state = GameState(
        world=world_config,
        player=player,
        random_seed=random_seed,
        rng=rng,
    )
    state.notify(INTRO_MESSAGE, Severity.INFO)
    state.events = []
    return state
