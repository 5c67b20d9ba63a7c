"""
Pydantic Schemas - Request/response models for presentation layers.

These models define the contract between a front end (terminal, web view,
test harness) and the engine. Snapshots never include the world itself:
front ends regenerate any map window from the pod position.

Error Codes:
- INVALID_ACTION: Command is not allowed in the current state (no-op)
- WRONG_MODE: Command belongs to another game mode
- INPUT_LOCKED: Timed events are still playing out
- NO_PATH: Navigation target is unreachable
- SESSION_NOT_FOUND: Session does not exist or has ended
- VALIDATION_ERROR: Malformed command
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_ACTION = "INVALID_ACTION"
    WRONG_MODE = "WRONG_MODE"
    INPUT_LOCKED = "INPUT_LOCKED"
    NO_PATH = "NO_PATH"
    NO_HANDLER = "NO_HANDLER"
    HANDLER_ERROR = "HANDLER_ERROR"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class CommandType(str, Enum):
    """Commands accepted by the service."""
    MOVE = "move"
    NAVIGATE = "navigate"
    INTERACT = "interact"
    SWITCH_BOT = "switch_bot"
    SWAP_RESERVE = "swap_reserve"
    EQUIP_SKILL = "equip_skill"
    USE_ITEM = "use_item"
    BUY_MODULE = "buy_module"
    REPAIR = "repair"
    COMBAT = "combat"


# =============================================================================
# Snapshot Models
# =============================================================================

class LogEntryInfo(BaseModel):
    """One presentation event."""
    id: int
    message: str
    severity: str = Field(description="info, player, enemy, gain, danger")
    delay_ms: int = 0

    model_config = {"from_attributes": True}


class ModuleInfo(BaseModel):
    id: str
    name: str
    effect: str
    value: int

    model_config = {"from_attributes": True}


class ItemInfo(BaseModel):
    id: str
    name: str
    effect: str
    count: int

    model_config = {"from_attributes": True}


class BotInfo(BaseModel):
    """Bot state for display."""
    id: str
    name: str
    bot_class: str
    hp: int
    max_hp: int
    level: int
    xp: int
    max_xp: int
    temp_shield: int = 0
    is_defeated: bool = False
    personality: str = ""
    active_skills: list[str] = Field(default_factory=list)
    stored_skills: list[str] = Field(default_factory=list)
    modules: list[ModuleInfo] = Field(default_factory=list)


class QuestInfo(BaseModel):
    stage: str
    parts_found: int
    parts_needed: int
    has_omni_tool: bool


class StatsInfo(BaseModel):
    steps: int = 0
    damage_dealt: int = 0
    damage_taken: int = 0
    healing_done: int = 0
    scrap_collected: int = 0
    bots_recruited: int = 0
    bots_lost: int = 0
    modules_installed: int = 0
    quests_completed: int = 0
    skill_usage: dict[str, int] = Field(default_factory=dict)

    model_config = {"from_attributes": True}


class PlayerInfo(BaseModel):
    """Everything the player owns."""
    x: int
    y: int
    facing: str
    scrap: int
    active_slot: int
    team: list[BotInfo] = Field(default_factory=list)
    reserves: list[BotInfo] = Field(default_factory=list)
    inventory: list[ItemInfo] = Field(default_factory=list)
    quest: QuestInfo
    stats: StatsInfo


class EnemyInfo(BaseModel):
    enemy_type: str
    name: str
    enemy_class: str
    hp: int
    max_hp: int
    is_boss: bool = False


class GameSnapshot(BaseModel):
    """Full observable state of a session."""
    session_id: str
    mode: str = Field(description="EXPLORING, COMBAT, GAME_OVER, VICTORY")
    quest_stage: str
    input_locked: bool = False
    is_traveling: bool = False
    message: Optional[str] = None
    interaction: Optional[str] = Field(None, description="Label of the interaction in reach")
    pod_x: int
    pod_y: int
    player: PlayerInfo
    enemy: Optional[EnemyInfo] = None
    combat_log: list[LogEntryInfo] = Field(default_factory=list)
    score: Optional[int] = Field(None, description="Final score once the game has ended")


# =============================================================================
# Requests
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to start a new game."""
    seed: Optional[int] = Field(None, description="Seed for reproducible games")
    pod_x: Optional[int] = Field(None, description="Fixed pod x (requires pod_y)")
    pod_y: Optional[int] = Field(None, description="Fixed pod y (requires pod_x)")

    @model_validator(mode="after")
    def check_pod(self):
        if (self.pod_x is None) != (self.pod_y is None):
            raise ValueError("pod_x and pod_y must be given together")
        return self


_REQUIRED_FIELDS: dict[CommandType, tuple[str, ...]] = {
    CommandType.MOVE: ("dx", "dy"),
    CommandType.NAVIGATE: ("x", "y"),
    CommandType.SWITCH_BOT: ("index",),
    CommandType.EQUIP_SKILL: ("skill_id",),
    CommandType.USE_ITEM: ("item_id",),
    CommandType.BUY_MODULE: ("module_id",),
    CommandType.COMBAT: ("token",),
}


class CommandRequest(BaseModel):
    """
    A single player command.

    Combat commands use the token form: a skill id, "SHIELD_MOD",
    "RECRUIT", "SWITCH:<index>" or "ITEM:<item id>".
    """
    command: CommandType
    dx: Optional[int] = Field(None, ge=-1, le=1)
    dy: Optional[int] = Field(None, ge=-1, le=1)
    x: Optional[int] = None
    y: Optional[int] = None
    index: Optional[int] = None
    team_index: Optional[int] = Field(None, description="-1 or null for none")
    reserve_index: Optional[int] = Field(None, description="-1 or null for none")
    skill_id: Optional[str] = None
    to_active: bool = True
    item_id: Optional[str] = None
    bot_index: Optional[int] = None
    module_id: Optional[str] = None
    token: Optional[str] = None

    @model_validator(mode="after")
    def check_required(self):
        missing = [
            name for name in _REQUIRED_FIELDS.get(self.command, ())
            if getattr(self, name) is None
        ]
        if missing:
            raise ValueError(f"{self.command.value} requires {', '.join(missing)}")
        return self


# =============================================================================
# Responses
# =============================================================================

class CommandResponse(BaseModel):
    """Result of a command."""
    success: bool
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    events: list[LogEntryInfo] = Field(default_factory=list)
    lock_ms: int = 0
    snapshot: Optional[GameSnapshot] = None


class ErrorResponse(BaseModel):
    """Structured error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
