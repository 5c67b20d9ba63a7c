"""
Action System - Commands, payloads, and results.

Actions cover:
1. Exploration commands (move, interact)
2. Camp management (squad, skills, items, modules, repairs)
3. Combat commands (skill, shield module, recruit, switch, item)

All state changes flow through actions. String command tokens are parsed
into actions at the service edge, never inside the engine.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import LogEntry


class ActionType(Enum):
    """Types of actions in the system."""
    # Exploration
    MOVE = "move"
    INTERACT = "interact"

    # Camp management
    SWITCH_BOT = "switch_bot"
    SWAP_RESERVE = "swap_reserve"
    EQUIP_SKILL = "equip_skill"
    USE_ITEM = "use_item"
    BUY_MODULE = "buy_module"
    REPAIR = "repair"

    # Combat
    COMBAT_SKILL = "combat_skill"
    COMBAT_SHIELD = "combat_shield"
    COMBAT_RECRUIT = "combat_recruit"
    COMBAT_SWITCH = "combat_switch"
    COMBAT_ITEM = "combat_item"


EXPLORATION_ACTIONS = frozenset({
    ActionType.MOVE,
    ActionType.INTERACT,
    ActionType.SWITCH_BOT,
    ActionType.SWAP_RESERVE,
    ActionType.EQUIP_SKILL,
    ActionType.USE_ITEM,
    ActionType.BUY_MODULE,
    ActionType.REPAIR,
})

COMBAT_ACTIONS = frozenset({
    ActionType.COMBAT_SKILL,
    ActionType.COMBAT_SHIELD,
    ActionType.COMBAT_RECRUIT,
    ActionType.COMBAT_SWITCH,
    ActionType.COMBAT_ITEM,
})


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    Validation happens in the reducer.
    """
    # Movement
    dx: int = 0
    dy: int = 0

    # Squad slots
    index: int | None = None
    team_index: int | None = None
    reserve_index: int | None = None
    bot_index: int | None = None

    # Catalog references
    skill_id: str | None = None
    item_id: str | None = None
    module_id: str | None = None

    to_active: bool = True


@dataclass
class Action:
    """A complete command to be applied to the game state."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def move(cls, dx: int, dy: int) -> Action:
        return cls(ActionType.MOVE, ActionPayload(dx=dx, dy=dy))

    @classmethod
    def interact(cls) -> Action:
        return cls(ActionType.INTERACT)

    @classmethod
    def switch_bot(cls, index: int) -> Action:
        return cls(ActionType.SWITCH_BOT, ActionPayload(index=index))

    @classmethod
    def swap_reserve(cls, team_index: int | None, reserve_index: int | None) -> Action:
        return cls(
            ActionType.SWAP_RESERVE,
            ActionPayload(team_index=team_index, reserve_index=reserve_index),
        )

    @classmethod
    def equip_skill(cls, skill_id: str, to_active: bool) -> Action:
        return cls(ActionType.EQUIP_SKILL, ActionPayload(skill_id=skill_id, to_active=to_active))

    @classmethod
    def use_item(cls, item_id: str, bot_index: int) -> Action:
        return cls(ActionType.USE_ITEM, ActionPayload(item_id=item_id, bot_index=bot_index))

    @classmethod
    def buy_module(cls, module_id: str) -> Action:
        return cls(ActionType.BUY_MODULE, ActionPayload(module_id=module_id))

    @classmethod
    def repair(cls) -> Action:
        return cls(ActionType.REPAIR)

    @classmethod
    def combat_skill(cls, skill_id: str) -> Action:
        return cls(ActionType.COMBAT_SKILL, ActionPayload(skill_id=skill_id))

    @classmethod
    def combat_shield(cls) -> Action:
        return cls(ActionType.COMBAT_SHIELD)

    @classmethod
    def combat_recruit(cls) -> Action:
        return cls(ActionType.COMBAT_RECRUIT)

    @classmethod
    def combat_switch(cls, index: int) -> Action:
        return cls(ActionType.COMBAT_SWITCH, ActionPayload(index=index))

    @classmethod
    def combat_item(cls, item_id: str) -> Action:
        return cls(ActionType.COMBAT_ITEM, ActionPayload(item_id=item_id))


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action succeeded
    - New state (on success, and for a wall bump that only turned the player)
    - Error message and code (on failure)
    - Timed presentation events produced by the action
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    events: list[LogEntry] = field(default_factory=list)
    halt_travel: bool = False

    @property
    def lock_ms(self) -> int:
        """How long input stays locked while events play out."""
        return max((e.delay_ms for e in self.events), default=0)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(cls, state: Any) -> ActionResult:
        """Create a success result, collecting the events the action emitted."""
        return cls(
            success=True,
            new_state=state,
            events=list(state.events),
            halt_travel=state.halt_travel,
        )
