"""
Progression - Experience, leveling and skill unlocks.
"""

from __future__ import annotations
from dataclasses import dataclass
import math

from .catalog import Catalog
from .state import MAX_ACTIVE_SKILLS, Bot


LEVEL_UP_HP = 15
XP_CURVE = 1.5


@dataclass
class LevelUp:
    """One level gained, and the skill learned with it (if any)."""
    level: int
    learned: str | None = None


def award_xp(bot: Bot, amount: int, catalog: Catalog) -> list[LevelUp]:
    """
    Grant xp to a bot and apply every level-up it triggers.

    Each level: xp -= max_xp, max_xp grows by XP_CURVE, base max hp
    grows by LEVEL_UP_HP, the bot is fully repaired, and the first
    catalog skill unlocked at the new level is learned (into RAM if
    there is a free slot, otherwise into storage).
    """
    bot.xp += amount
    gained = []
    while bot.xp >= bot.max_xp:
        bot.xp -= bot.max_xp
        bot.level += 1
        bot.max_xp = math.floor(bot.max_xp * XP_CURVE)
        bot.base_max_hp += LEVEL_UP_HP
        bot.set_hp(bot.max_hp)
        gained.append(LevelUp(level=bot.level, learned=learn_level_skill(bot, catalog)))
    return gained


def learn_level_skill(bot: Bot, catalog: Catalog) -> str | None:
    skill = catalog.skill_unlocked_at(bot.level)
    if skill is None or bot.knows_skill(skill.id):
        return None
    if len(bot.active_skills) < MAX_ACTIVE_SKILLS:
        bot.active_skills.append(skill.id)
    else:
        bot.stored_skills.append(skill.id)
    return skill.id
