"""
Inventory - Consumable item effects, shared by camp and combat.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import math

from .catalog import Catalog
from .progression import LevelUp, award_xp
from .state import Bot, ItemEffect, Player


@dataclass
class ItemUse:
    """Outcome of consuming one item."""
    item_name: str
    effect: ItemEffect
    restored: int = 0
    xp: int = 0
    level_ups: list[LevelUp] = field(default_factory=list)


def check_item_use(player: Player, item_id: str, bot: Bot) -> str | None:
    """
    Returns an error message if the item cannot be used on this bot.

    HEAL needs a bot that is up, REVIVE needs one that is down, and
    quest items are never consumed.
    """
    item = player.find_item(item_id)
    if item is None or item.count <= 0:
        return f"No {item_id} in inventory"
    if item.effect == ItemEffect.QUEST:
        return f"{item.name} cannot be used"
    if item.effect == ItemEffect.HEAL and bot.is_defeated:
        return f"{bot.name} is offline. Use a revive item."
    if item.effect == ItemEffect.REVIVE and not bot.is_defeated:
        return f"{bot.name} is not offline"
    return None


def apply_item(player: Player, item_id: str, bot: Bot, catalog: Catalog) -> ItemUse:
    """Consume one item on a bot. Call check_item_use first."""
    item = player.find_item(item_id)
    outcome = ItemUse(item_name=item.name, effect=item.effect)

    if item.effect == ItemEffect.HEAL:
        outcome.restored = bot.heal(int(item.value))
    elif item.effect == ItemEffect.REVIVE:
        bot.set_hp(max(1, math.floor(bot.max_hp * item.value)))
        outcome.restored = bot.hp
    elif item.effect == ItemEffect.XP:
        outcome.xp = int(item.value)
        outcome.level_ups = award_xp(bot, outcome.xp, catalog)

    player.stats.healing_done += outcome.restored
    player.consume_item(item_id)
    return outcome
