"""
Catalog - Immutable reference data the engine reads but never mutates.

The catalog holds:
- Skill definitions (with the per-skill balance table)
- Item and module templates
- Bot class templates (starting hp and loadouts)
- Enemy spawn tables and the guardian boss
- Name, personality and hint pools

It is passed explicitly to the reducer, so alternate catalogs can be
swapped in for tests or rebalancing.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .state import BotClass, Enemy, Item, ItemEffect, Module


class SkillCategory(Enum):
    ATTACK = "ATTACK"
    SUPPORT = "SUPPORT"
    TECH = "TECH"
    DEFENSE = "DEFENSE"


class DamageType(Enum):
    KINETIC = "KINETIC"
    THERMAL = "THERMAL"
    ELECTRIC = "ELECTRIC"
    NONE = "NONE"


@dataclass(frozen=True)
class SkillDefinition:
    """
    Static skill entry.

    Balance fields:
    - power: base damage before level and module bonuses
    - power_max: if set, base damage is drawn uniformly from [power, power_max]
    - success_chance: probability the skill lands at all (hack-style skills)
    - heal: hp restored by SUPPORT skills (0 means a stance-setting move)
    """
    id: str
    name: str
    category: SkillCategory
    damage_type: DamageType = DamageType.NONE
    min_level: int = 1
    description: str = ""
    power: int = 12
    power_max: int | None = None
    success_chance: float = 1.0
    heal: int = 0

    @property
    def deals_damage(self) -> bool:
        return self.category in {SkillCategory.ATTACK, SkillCategory.TECH}


@dataclass(frozen=True)
class BotClassTemplate:
    bot_class: BotClass
    name: str
    hp: int
    starting_skills: tuple[str, ...]


@dataclass(frozen=True)
class EnemyTemplate:
    """
    One row of an enemy spawn table.

    Spawned hp is base_hp + hp_per_level * player level. A template
    applies to player levels in [min_level, max_level].
    """
    enemy_type: str
    name: str
    enemy_class: BotClass
    base_hp: int
    xp_value: int
    weight: int = 1
    hp_per_level: int = 0
    min_level: int = 1
    max_level: int | None = None
    is_boss: bool = False

    def applies_to(self, level: int) -> bool:
        if level < self.min_level:
            return False
        return self.max_level is None or level <= self.max_level

    def spawn(self, level: int) -> Enemy:
        hp = self.base_hp + self.hp_per_level * level
        return Enemy(
            enemy_type=self.enemy_type,
            name=self.name,
            enemy_class=self.enemy_class,
            hp=hp,
            max_hp=hp,
            xp_value=self.xp_value,
            is_boss=self.is_boss,
        )


def _freeze(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class Catalog:
    """
    Read-only registry of game content.

    Order matters for skills: the first skill whose min_level equals a
    bot's new level is the one auto-learned on level-up.
    """
    skills: Mapping[str, SkillDefinition]
    items: Mapping[str, Item]
    modules: Mapping[str, Module]
    bot_classes: Mapping[BotClass, BotClassTemplate]
    enemies: tuple[EnemyTemplate, ...]
    boss: EnemyTemplate
    quest_part_id: str
    omni_tool_id: str
    unique_names: tuple[str, ...] = ()
    personalities: tuple[str, ...] = ()
    npc_hints: tuple[str, ...] = ()
    metadata: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(
        cls,
        skills: list[SkillDefinition],
        items: list[Item],
        modules: list[Module],
        bot_classes: list[BotClassTemplate],
        enemies: list[EnemyTemplate],
        boss: EnemyTemplate,
        quest_part_id: str,
        omni_tool_id: str,
        unique_names: list[str] | None = None,
        personalities: list[str] | None = None,
        npc_hints: list[str] | None = None,
    ) -> Catalog:
        """Build a catalog from plain lists, keyed and frozen."""
        return cls(
            skills=_freeze({s.id: s for s in skills}),
            items=_freeze({i.id: i for i in items}),
            modules=_freeze({m.id: m for m in modules}),
            bot_classes=_freeze({t.bot_class: t for t in bot_classes}),
            enemies=tuple(enemies),
            boss=boss,
            quest_part_id=quest_part_id,
            omni_tool_id=omni_tool_id,
            unique_names=tuple(unique_names or ()),
            personalities=tuple(personalities or ()),
            npc_hints=tuple(npc_hints or ()),
        )

    def get_skill(self, skill_id: str) -> SkillDefinition | None:
        return self.skills.get(skill_id)

    def get_module(self, module_id: str) -> Module | None:
        return self.modules.get(module_id)

    def new_item(self, item_id: str, count: int = 1) -> Item:
        """Fresh inventory stack from a template."""
        return replace(self.items[item_id], count=count)

    def new_module(self, module_id: str) -> Module:
        return replace(self.modules[module_id])

    def skill_unlocked_at(self, level: int) -> SkillDefinition | None:
        for skill in self.skills.values():
            if skill.min_level == level:
                return skill
        return None

    def loot_table(self) -> list[Item]:
        return [i for i in self.items.values() if i.effect != ItemEffect.QUEST]

    def enemy_table(self, level: int) -> list[EnemyTemplate]:
        return [e for e in self.enemies if e.applies_to(level)]
