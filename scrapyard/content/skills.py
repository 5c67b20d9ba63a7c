"""
Skill Definitions - The skill catalog and its balance table.

Each bot class has one starting attack and unlocks further skills at
levels 3 and 5. HACK is universal. Base damage per skill:

    default 12, LASER_SHOT 15, BURST_FIRE 10-20, GRENADE 40,
    BASH 20, ZAP 15, HACK 30 (60% success, else nothing)
"""

from ..engine_core.catalog import DamageType, SkillCategory, SkillDefinition


# ============================================================================
# Scout
# ============================================================================

LASER_SHOT = SkillDefinition(
    id="LASER_SHOT",
    name="Laser Shot",
    description="Fast, reliable thermal damage.",
    category=SkillCategory.ATTACK,
    damage_type=DamageType.THERMAL,
    power=15,
)

TARGET_LOCK = SkillDefinition(
    id="TARGET_LOCK",
    name="Target Lock",
    description="Lock onto the target. Deals no damage.",
    category=SkillCategory.SUPPORT,
    min_level=3,
)

QUICK_DASH = SkillDefinition(
    id="QUICK_DASH",
    name="Quick Dash",
    description="Evasive manoeuvre. Raises a temporary shield.",
    category=SkillCategory.DEFENSE,
    min_level=5,
)

# ============================================================================
# Assault
# ============================================================================

BURST_FIRE = SkillDefinition(
    id="BURST_FIRE",
    name="Burst Fire",
    description="Fire 3 shots. Low accuracy.",
    category=SkillCategory.ATTACK,
    damage_type=DamageType.KINETIC,
    power=10,
    power_max=20,
)

GRENADE = SkillDefinition(
    id="GRENADE",
    name="Plasma Grenade",
    description="High damage explosive.",
    category=SkillCategory.ATTACK,
    damage_type=DamageType.THERMAL,
    min_level=3,
    power=40,
)

OVERCLOCK = SkillDefinition(
    id="OVERCLOCK",
    name="Overclock",
    description="Push the core past safe limits.",
    category=SkillCategory.SUPPORT,
    min_level=5,
)

# ============================================================================
# Tank
# ============================================================================

BASH = SkillDefinition(
    id="BASH",
    name="Piston Bash",
    description="Heavy melee hit.",
    category=SkillCategory.ATTACK,
    damage_type=DamageType.KINETIC,
    power=20,
)

REINFORCE = SkillDefinition(
    id="REINFORCE",
    name="Reinforce",
    description="Gain a level-scaled temporary shield.",
    category=SkillCategory.DEFENSE,
    min_level=3,
)

TAUNT = SkillDefinition(
    id="TAUNT",
    name="Aggro Shout",
    description="Brace for the next hit.",
    category=SkillCategory.DEFENSE,
    min_level=5,
)

# ============================================================================
# Tech
# ============================================================================

ZAP = SkillDefinition(
    id="ZAP",
    name="Arc Zap",
    description="Electric discharge.",
    category=SkillCategory.TECH,
    damage_type=DamageType.ELECTRIC,
    power=15,
)

QUICK_FIX = SkillDefinition(
    id="QUICK_FIX",
    name="Quick Fix",
    description="Restore 30 HP.",
    category=SkillCategory.SUPPORT,
    min_level=3,
    heal=30,
)

VIRUS = SkillDefinition(
    id="VIRUS",
    name="System Virus",
    description="Corrupts enemy logic.",
    category=SkillCategory.TECH,
    damage_type=DamageType.ELECTRIC,
    min_level=5,
)

# ============================================================================
# Universal
# ============================================================================

HACK = SkillDefinition(
    id="HACK",
    name="System Hack",
    description="Risky. High damage or nothing.",
    category=SkillCategory.TECH,
    power=30,
    success_chance=0.6,
)


ALL_SKILLS: list[SkillDefinition] = [
    LASER_SHOT, TARGET_LOCK, QUICK_DASH,
    BURST_FIRE, GRENADE, OVERCLOCK,
    BASH, REINFORCE, TAUNT,
    ZAP, QUICK_FIX, VIRUS,
    HACK,
]
