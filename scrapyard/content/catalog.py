"""
Default Catalog - The shipped content set.
"""

from ..engine_core.catalog import Catalog
from ..engine_core.validation import CatalogValidationError, validate_catalog
from .equipment import ALL_ITEMS, ALL_MODULES, OMNI_TOOL, QUEST_PART
from .skills import ALL_SKILLS
from .units import BOT_CLASSES, ENEMIES, GUARDIAN, NPC_HINTS, PERSONALITIES, UNIQUE_NAMES


def build_default_catalog() -> Catalog:
    """Assemble the default catalog without validating it."""
    return Catalog.build(
        skills=ALL_SKILLS,
        items=ALL_ITEMS,
        modules=ALL_MODULES,
        bot_classes=BOT_CLASSES,
        enemies=ENEMIES,
        boss=GUARDIAN,
        quest_part_id=QUEST_PART.id,
        omni_tool_id=OMNI_TOOL.id,
        unique_names=UNIQUE_NAMES,
        personalities=PERSONALITIES,
        npc_hints=NPC_HINTS,
    )


def create_default_catalog() -> Catalog:
    """
    Create the default game catalog.

    Raises CatalogValidationError if the content is inconsistent.
    """
    catalog = build_default_catalog()
    result = validate_catalog(catalog)
    if not result.valid:
        raise CatalogValidationError(result.errors)
    return catalog
