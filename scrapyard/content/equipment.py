"""
Equipment - Item and module templates.
"""

from ..engine_core.state import Item, ItemEffect, Module, ModuleEffect, ModuleType


REPAIR_KIT = Item(
    id="repair_kit",
    name="Repair Kit",
    description="Heal 50 HP",
    effect=ItemEffect.HEAL,
    value=50,
)

XP_CHIP = Item(
    id="xp_chip",
    name="Data Chip",
    description="Grant 50 XP",
    effect=ItemEffect.XP,
    value=50,
)

BATTERY = Item(
    id="battery",
    name="Power Cell",
    description="Revive Bot (25% HP)",
    effect=ItemEffect.REVIVE,
    value=0.25,
)

QUEST_PART = Item(
    id="hyperdrive_part",
    name="Hyperdrive Flux",
    description="Required to repair the Pod.",
    effect=ItemEffect.QUEST,
    value=1,
)

OMNI_TOOL = Item(
    id="omni_tool",
    name="The Omni-Tool",
    description="The master key to the Escape Pod.",
    effect=ItemEffect.QUEST,
    value=1,
)

ALL_ITEMS: list[Item] = [REPAIR_KIT, XP_CHIP, BATTERY, QUEST_PART, OMNI_TOOL]


ALL_MODULES: list[Module] = [
    Module(
        id="hull_plating",
        name="Titanium Plating",
        description="Increases Max HP by 50.",
        cost=100,
        type=ModuleType.PASSIVE,
        effect_id=ModuleEffect.HULL_PLATING,
        value=50,
    ),
    Module(
        id="targeting_chip",
        name="Combat CPU",
        description="Increases Attack damage by 10.",
        cost=150,
        type=ModuleType.PASSIVE,
        effect_id=ModuleEffect.DMG_BOOST,
        value=10,
    ),
    Module(
        id="shield_gen",
        name="Shield Generator",
        description="Active Skill: Gain 30 Temporary Shield.",
        cost=250,
        type=ModuleType.ACTIVE,
        effect_id=ModuleEffect.SHIELD,
        value=30,
    ),
    Module(
        id="auto_repair",
        name="Nanite Hive",
        description="Heal 10 HP after every battle.",
        cost=300,
        type=ModuleType.PASSIVE,
        effect_id=ModuleEffect.AUTO_REPAIR,
        value=10,
    ),
    Module(
        id="scanner",
        name="Proximity Scanner",
        description="Fewer random encounters.",
        cost=120,
        type=ModuleType.PASSIVE,
        effect_id=ModuleEffect.SCANNER,
        value=1,
    ),
]
