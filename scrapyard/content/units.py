"""
Units - Bot class templates, enemy spawn tables and flavor pools.

Spawn tables are weighted. Below level 3 only drones and mechs appear;
from level 3 on, heavier and rarer enemies join and hp scales with level.
"""

from ..engine_core.catalog import BotClassTemplate, EnemyTemplate
from ..engine_core.state import BotClass


BOT_CLASSES: list[BotClassTemplate] = [
    BotClassTemplate(BotClass.SCOUT, "Scout", 80, ("LASER_SHOT", "HACK")),
    BotClassTemplate(BotClass.ASSAULT, "Assault", 120, ("BURST_FIRE", "HACK")),
    BotClassTemplate(BotClass.TANK, "Tank", 150, ("BASH", "HACK")),
    BotClassTemplate(BotClass.TECH, "Tech", 70, ("ZAP", "HACK")),
]


ENEMIES: list[EnemyTemplate] = [
    # Early game (levels 1-2)
    EnemyTemplate(
        enemy_type="SCRAP_DRONE", name="Scrap Drone", enemy_class=BotClass.SCOUT,
        base_hp=40, xp_value=20, weight=80, max_level=2,
    ),
    EnemyTemplate(
        enemy_type="HEAVY_MECH", name="Heavy Mech", enemy_class=BotClass.ASSAULT,
        base_hp=80, xp_value=40, weight=20, max_level=2,
    ),
    # Level 3+
    EnemyTemplate(
        enemy_type="SCRAP_DRONE", name="Scrap Drone", enemy_class=BotClass.SCOUT,
        base_hp=50, hp_per_level=5, xp_value=25, weight=40, min_level=3,
    ),
    EnemyTemplate(
        enemy_type="HEAVY_MECH", name="Heavy Mech", enemy_class=BotClass.ASSAULT,
        base_hp=100, hp_per_level=10, xp_value=40, weight=30, min_level=3,
    ),
    EnemyTemplate(
        enemy_type="NANITE_SWARM", name="Nanite Swarm", enemy_class=BotClass.TECH,
        base_hp=60, hp_per_level=5, xp_value=50, weight=20, min_level=3,
    ),
    EnemyTemplate(
        enemy_type="JUNKER_BEHEMOTH", name="Junker Behemoth", enemy_class=BotClass.TANK,
        base_hp=200, hp_per_level=10, xp_value=100, weight=10, min_level=3,
    ),
]


GUARDIAN = EnemyTemplate(
    enemy_type="CORE_GUARDIAN",
    name="THE WARDEN",
    enemy_class=BotClass.TECH,
    base_hp=500,
    xp_value=1000,
    is_boss=True,
)


UNIQUE_NAMES = [
    "Rusty", "Sparky", "Bolt", "Gearhead", "Circuit", "Omega",
    "Unit-734", "Glitch", "Prime", "Echo", "Vortex", "Ironclad",
]

PERSONALITIES = [
    "Cheerful beep.", "Grumpy hum.", "Stoic silence.", "Manic clicking.", "Philosophical whir.",
]

NPC_HINTS = [
    "I saw a Hyperdrive part in a crate far from here...",
    "The Guardian only wakes when the pod is powered.",
    "Need spare parts? Too bad.",
    "My logic core hurts.",
]
