"""
Game State - Entity model and the aggregate game snapshot.

Design principles:
- Snapshot-per-turn: the reducer clones the state, mutates the clone, returns it
- The world is never stored: only the player's position and visited POI keys
- All randomness flows through GameState.rng, which is cloned with the snapshot
- Bots are owned by exactly one of team/reserves at any time
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
import math
import random
from typing import Any


MAX_TEAM_SIZE = 3
MAX_ACTIVE_SKILLS = 3

# Pod placement bounds (per-axis magnitude) and the guardian's fixed offset
POD_MIN_DISTANCE = 15
POD_MAX_DISTANCE = 40
GUARDIAN_OFFSET = (0, -3)


class Terrain(Enum):
    """Terrain type of a grid tile."""
    FLOOR = 0
    WALL = 1
    DEBRIS = 2
    ACID_POOL = 3


class POI(Enum):
    """Point-of-interest type of a grid tile."""
    NONE = 0
    CACHE = 1
    DERELICT = 2
    NPC = 3
    POD = 4
    GUARDIAN = 5


class Facing(Enum):
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def delta(self) -> tuple[int, int]:
        return _FACING_DELTAS[self]

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> Facing:
        """Facing for a step; vertical only when there is no horizontal part."""
        if dx == 0:
            return cls.DOWN if dy > 0 else cls.UP
        return cls.RIGHT if dx > 0 else cls.LEFT


_FACING_DELTAS = {
    Facing.UP: (0, -1),
    Facing.DOWN: (0, 1),
    Facing.LEFT: (-1, 0),
    Facing.RIGHT: (1, 0),
}


class BotClass(Enum):
    """Unit class. Drives starting loadouts and type effectiveness."""
    SCOUT = "SCOUT"
    ASSAULT = "ASSAULT"
    TANK = "TANK"
    TECH = "TECH"


class ItemEffect(Enum):
    HEAL = "HEAL"
    XP = "XP"
    REVIVE = "REVIVE"
    QUEST = "QUEST"


class ModuleType(Enum):
    PASSIVE = "PASSIVE"
    ACTIVE = "ACTIVE"


class ModuleEffect(Enum):
    HULL_PLATING = "HULL_PLATING"
    DMG_BOOST = "DMG_BOOST"
    SHIELD = "SHIELD"
    SCANNER = "SCANNER"
    AUTO_REPAIR = "AUTO_REPAIR"


class QuestStage(Enum):
    """Quest stages, in the only order they can be reached."""
    FIND_POD = "FIND_POD"
    GATHER_PARTS = "GATHER_PARTS"
    DEFEAT_GUARDIAN = "DEFEAT_GUARDIAN"
    REPAIR_POD = "REPAIR_POD"
    COMPLETED = "COMPLETED"

    @property
    def order(self) -> int:
        return list(QuestStage).index(self)


class GameMode(Enum):
    """High-level game modes."""
    EXPLORING = "EXPLORING"
    COMBAT = "COMBAT"
    GAME_OVER = "GAME_OVER"
    VICTORY = "VICTORY"


class CombatPhase(Enum):
    """Phases of the per-encounter combat state machine."""
    AWAITING_PLAYER_ACTION = "awaiting_player_action"
    RESOLVING_PLAYER_ACTION = "resolving_player_action"
    CHECKING_VICTORY = "checking_victory"
    ENEMY_ATTACK = "enemy_attack"

    # Terminal phases
    VICTORY = "victory"
    RECRUITED = "recruited"
    DEFEAT = "defeat"

    @property
    def is_terminal(self) -> bool:
        return self in {CombatPhase.VICTORY, CombatPhase.RECRUITED, CombatPhase.DEFEAT}


class Severity(Enum):
    """Log entry severity tags consumed by the presentation layer."""
    INFO = "info"
    PLAYER = "player"
    ENEMY = "enemy"
    GAIN = "gain"
    DANGER = "danger"


@dataclass(frozen=True)
class Position:
    """Integer grid coordinate. The grid is unbounded."""
    x: int
    y: int

    @property
    def key(self) -> str:
        """Canonical string key, used for visited sets and BFS bookkeeping."""
        return f"{self.x},{self.y}"

    def offset(self, dx: int, dy: int) -> Position:
        return Position(self.x + dx, self.y + dy)

    def neighbors(self) -> list[Position]:
        """The four orthogonal neighbors: up, right, down, left."""
        return [
            Position(self.x, self.y - 1),
            Position(self.x + 1, self.y),
            Position(self.x, self.y + 1),
            Position(self.x - 1, self.y),
        ]

    def distance_to(self, other: Position) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def chebyshev_to(self, other: Position) -> int:
        return max(abs(self.x - other.x), abs(self.y - other.y))


@dataclass(frozen=True)
class WorldConfig:
    """
    Per-game world parameters, fixed at game start.

    The world itself is a pure function of (coordinates, WorldConfig).
    """
    pod: Position
    guardian_offset: tuple[int, int] = GUARDIAN_OFFSET
    origin: Position = Position(0, 0)

    @property
    def guardian(self) -> Position:
        return self.pod.offset(*self.guardian_offset)

    @classmethod
    def create(cls, rng: random.Random) -> WorldConfig:
        """Place the pod somewhere in a wide ring around the origin."""
        px = rng.randint(POD_MIN_DISTANCE, POD_MAX_DISTANCE) * rng.choice((-1, 1))
        py = rng.randint(POD_MIN_DISTANCE, POD_MAX_DISTANCE) * rng.choice((-1, 1))
        return cls(pod=Position(px, py))


@dataclass
class Module:
    """A purchasable upgrade. Permanently attached to the bot that bought it."""
    id: str
    name: str
    cost: int
    type: ModuleType
    effect_id: ModuleEffect
    value: int
    description: str = ""


@dataclass
class Item:
    """An inventory stack."""
    id: str
    name: str
    effect: ItemEffect
    value: float
    count: int = 1
    description: str = ""

    @property
    def is_consumable(self) -> bool:
        return self.effect != ItemEffect.QUEST


@dataclass
class Bot:
    """
    A player-controlled unit.

    Invariants:
    - 0 <= hp <= max_hp
    - is_defeated <=> hp == 0
    - len(active_skills) <= MAX_ACTIVE_SKILLS
    - a skill id is never in both active_skills and stored_skills
    """
    id: str
    name: str
    bot_class: BotClass
    hp: int
    base_max_hp: int
    level: int = 1
    xp: int = 0
    max_xp: int = 100
    modules: list[Module] = field(default_factory=list)
    active_skills: list[str] = field(default_factory=list)  # "RAM"
    stored_skills: list[str] = field(default_factory=list)  # "Storage"
    temp_shield: int = 0
    is_defeated: bool = False
    personality: str = ""

    @property
    def max_hp(self) -> int:
        """Effective max HP: base plus installed hull plating."""
        return self.base_max_hp + sum(
            m.value for m in self.modules if m.effect_id == ModuleEffect.HULL_PLATING
        )

    @property
    def damage_bonus(self) -> int:
        return self.module_value(ModuleEffect.DMG_BOOST) or 0

    def module_value(self, effect: ModuleEffect) -> int | None:
        """Value of the first installed module with this effect, if any."""
        for module in self.modules:
            if module.effect_id == effect:
                return module.value
        return None

    def has_module(self, effect: ModuleEffect) -> bool:
        return self.module_value(effect) is not None

    def owns_module(self, module_id: str) -> bool:
        return any(m.id == module_id for m in self.modules)

    def knows_skill(self, skill_id: str) -> bool:
        return skill_id in self.active_skills or skill_id in self.stored_skills

    def set_hp(self, value: int) -> None:
        """Set hp clamped to [0, max_hp], keeping is_defeated in sync."""
        self.hp = max(0, min(self.max_hp, value))
        self.is_defeated = self.hp == 0

    def heal(self, amount: int) -> int:
        """Heal a non-defeated bot. Returns hp actually restored."""
        if self.is_defeated or amount <= 0:
            return 0
        before = self.hp
        self.set_hp(self.hp + amount)
        return self.hp - before

    def take_damage(self, amount: int) -> tuple[int, int]:
        """
        Apply incoming damage, shield first.

        Returns (absorbed_by_shield, hp_lost).
        """
        absorbed = min(self.temp_shield, amount)
        self.temp_shield -= absorbed
        overflow = amount - absorbed
        before = self.hp
        self.set_hp(self.hp - overflow)
        return absorbed, before - self.hp


@dataclass
class Enemy:
    """An ephemeral opponent, alive for one encounter."""
    enemy_type: str
    name: str
    enemy_class: BotClass
    hp: int
    max_hp: int
    xp_value: int
    is_boss: bool = False


@dataclass
class QuestState:
    stage: QuestStage = QuestStage.FIND_POD
    parts_found: int = 0
    parts_needed: int = 3
    has_omni_tool: bool = False

    @property
    def parts_complete(self) -> bool:
        return self.parts_found >= self.parts_needed


@dataclass
class PlayerStats:
    """Write-only accumulators during play, read once for scoring."""
    steps: int = 0
    damage_dealt: int = 0
    damage_taken: int = 0
    healing_done: int = 0
    scrap_collected: int = 0
    bots_recruited: int = 0
    bots_lost: int = 0
    modules_installed: int = 0
    quests_completed: int = 0
    skill_usage: dict[str, int] = field(default_factory=dict)

    def record_skill(self, skill_id: str) -> None:
        self.skill_usage[skill_id] = self.skill_usage.get(skill_id, 0) + 1


@dataclass
class Player:
    """
    Aggregate root for everything the player owns.
    """
    position: Position
    facing: Facing = Facing.DOWN
    scrap: int = 0
    team: list[Bot] = field(default_factory=list)
    active_slot: int = 0
    reserves: list[Bot] = field(default_factory=list)
    inventory: list[Item] = field(default_factory=list)
    visited_pois: dict[str, bool] = field(default_factory=dict)
    quest: QuestState = field(default_factory=QuestState)
    stats: PlayerStats = field(default_factory=PlayerStats)

    @property
    def active_bot(self) -> Bot:
        return self.team[self.active_slot]

    @property
    def all_bots(self) -> list[Bot]:
        return self.team + self.reserves

    def first_alive_slot(self) -> int | None:
        for idx, bot in enumerate(self.team):
            if not bot.is_defeated:
                return idx
        return None

    def find_item(self, item_id: str) -> Item | None:
        for item in self.inventory:
            if item.id == item_id:
                return item
        return None

    def add_item(self, item: Item) -> None:
        """Stack onto an existing entry with the same id, or append."""
        existing = self.find_item(item.id)
        if existing:
            existing.count += item.count
        else:
            self.inventory.append(item)

    def consume_item(self, item_id: str, count: int = 1) -> None:
        """Decrement a stack, dropping it when empty."""
        for item in self.inventory:
            if item.id == item_id:
                item.count -= count
        self.inventory = [i for i in self.inventory if i.count > 0]

    def is_visited(self, pos: Position) -> bool:
        return self.visited_pois.get(pos.key, False)

    def mark_visited(self, pos: Position) -> None:
        self.visited_pois[pos.key] = True

    def add_recruit(self, bot: Bot) -> bool:
        """Place a new bot in the squad if there is room, else in reserves."""
        if len(self.team) < MAX_TEAM_SIZE:
            self.team.append(bot)
            return True
        self.reserves.append(bot)
        return False


@dataclass
class Encounter:
    """The combat currently in progress."""
    enemy: Enemy
    phase: CombatPhase = CombatPhase.AWAITING_PLAYER_ACTION
    round: int = 1


@dataclass
class LogEntry:
    """
    A presentation event.

    delay_ms is the offset from command submission at which the
    presentation layer should show the entry.
    """
    message: str
    severity: Severity
    id: int
    delay_ms: int = 0
    phase: CombatPhase | None = None


@dataclass
class GameState:
    """
    Complete game snapshot.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    world: WorldConfig
    player: Player
    mode: GameMode = GameMode.EXPLORING
    encounter: Encounter | None = None

    # Ordered combat log for the current (or last) encounter
    combat_log: list[LogEntry] = field(default_factory=list)

    # Last exploration status message ("toast")
    message: str | None = None

    # Monotonic counters
    next_log_id: int = 1
    next_entity_id: int = 1
    turn_number: int = 0

    # Random source for determinism
    random_seed: int | None = None
    rng: random.Random = field(default_factory=random.Random)

    # Scratch space filled while a single action is being applied
    events: list[LogEntry] = field(default_factory=list)
    halt_travel: bool = False

    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def enemy(self) -> Enemy | None:
        return self.encounter.enemy if self.encounter else None

    @property
    def is_over(self) -> bool:
        return self.mode in {GameMode.GAME_OVER, GameMode.VICTORY}

    def emit(
        self,
        message: str,
        severity: Severity = Severity.INFO,
        delay_ms: int = 0,
        phase: CombatPhase | None = None,
    ) -> LogEntry:
        """Record a presentation event; combat-phase events also go to the combat log."""
        entry = LogEntry(
            message=message,
            severity=severity,
            id=self.next_log_id,
            delay_ms=delay_ms,
            phase=phase,
        )
        self.next_log_id += 1
        self.events.append(entry)
        if phase is not None:
            self.combat_log.append(entry)
        return entry

    def notify(self, message: str, severity: Severity = Severity.INFO) -> LogEntry:
        """Exploration status message."""
        self.message = message
        return self.emit(message, severity)

    def new_entity_id(self, prefix: str) -> str:
        entity_id = f"{prefix}_{self.next_entity_id}"
        self.next_entity_id += 1
        return entity_id

    def clone(self) -> GameState:
        """Deep copy the state, including the random source."""
        return deepcopy(self)
