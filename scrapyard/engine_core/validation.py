"""
Catalog Validation - Consistency checks for game content.

Validates that:
1. Ids are present and references resolve (starting skills, quest items)
2. Enemy tables cover every player level and have positive weights
3. Balance values are in range (success chances, power ranges)
"""

from __future__ import annotations
from dataclasses import dataclass

from .catalog import Catalog
from .state import BotClass, ItemEffect


class CatalogValidationError(Exception):
    """Raised when a catalog fails validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Catalog validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_catalog(catalog: Catalog, max_checked_level: int = 20) -> ValidationResult:
    """
    Validate a catalog.

    Returns ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    # Skills
    for skill_id, skill in catalog.skills.items():
        if skill_id != skill.id:
            errors.append(f"Skill registered as {skill_id} but has id {skill.id}")
        if skill.min_level < 1:
            errors.append(f"Skill {skill.id}: min_level must be >= 1")
        if not 0.0 <= skill.success_chance <= 1.0:
            errors.append(f"Skill {skill.id}: success_chance must be in [0, 1]")
        if skill.power_max is not None and skill.power_max < skill.power:
            errors.append(f"Skill {skill.id}: power_max below power")
        if skill.heal < 0:
            errors.append(f"Skill {skill.id}: heal must be >= 0")

    # Bot classes
    for bot_class in BotClass:
        template = catalog.bot_classes.get(bot_class)
        if template is None:
            errors.append(f"No template for bot class {bot_class.value}")
            continue
        if template.hp <= 0:
            errors.append(f"Bot class {bot_class.value}: hp must be positive")
        for skill_id in template.starting_skills:
            if skill_id not in catalog.skills:
                errors.append(f"Bot class {bot_class.value}: unknown starting skill {skill_id}")
        if len(template.starting_skills) > 3:
            errors.append(f"Bot class {bot_class.value}: more starting skills than RAM slots")

    # Items
    for item_id in (catalog.quest_part_id, catalog.omni_tool_id):
        item = catalog.items.get(item_id)
        if item is None:
            errors.append(f"Quest item {item_id} not in catalog")
        elif item.effect != ItemEffect.QUEST:
            errors.append(f"Quest item {item_id} must have QUEST effect")
    if not catalog.loot_table():
        warnings.append("No consumable items: loot rolls will never drop anything")

    # Modules
    for module in catalog.modules.values():
        if module.cost < 0:
            errors.append(f"Module {module.id}: cost must be >= 0")

    # Enemy tables
    for template in catalog.enemies:
        if template.weight <= 0:
            errors.append(f"Enemy {template.enemy_type}: weight must be positive")
        if template.is_boss:
            errors.append(f"Enemy {template.enemy_type}: bosses cannot be in the spawn table")
    for level in range(1, max_checked_level + 1):
        if not catalog.enemy_table(level):
            errors.append(f"No enemies spawn at level {level}")
            break
    if not catalog.boss.is_boss:
        errors.append("Boss template must have is_boss set")

    # Pools
    if not catalog.unique_names:
        errors.append("unique_names must not be empty")
    if not catalog.personalities:
        warnings.append("No personalities defined")
    if not catalog.npc_hints:
        warnings.append("No NPC hints defined")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
