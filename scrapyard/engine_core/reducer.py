"""
Reducer - Applies actions to game state.

The reducer is the single point of state transition.
All state changes must go through apply().

Design principles:
- (state, action) -> new_state: the input snapshot is never mutated
- Validates the mode before dispatching
- Returns ActionResult with success/failure and the emitted events
- Delegates to the exploration controller and the combat resolver
"""

from __future__ import annotations
from dataclasses import dataclass, field

from loguru import logger

from .action import Action, ActionPayload, ActionResult, ActionType, COMBAT_ACTIONS, EXPLORATION_ACTIONS
from .catalog import Catalog
from .combat import CombatResolver, CombatTiming
from .exploration import ExplorationController
from .state import CombatPhase, GameMode, GameState


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    The catalog provides skills, items and spawn tables.
    """
    catalog: Catalog
    timing: CombatTiming = field(default_factory=CombatTiming)

    def __post_init__(self):
        self.combat = CombatResolver(catalog=self.catalog, timing=self.timing)
        self.exploration = ExplorationController(catalog=self.catalog, combat=self.combat)
        self.combat.on_boss_defeated = self.exploration.complete_guardian

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            logger.debug("Rejected {}: {}", action.action_type.value, validation_error)
            return ActionResult.failure(validation_error, error_code="WRONG_MODE")

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        working = state.clone()
        working.events = []
        working.halt_travel = False

        try:
            error = handler(working, action.payload)
        except Exception as e:
            logger.exception("Handler for {} failed", action.action_type.value)
            return ActionResult.failure(str(e), error_code="HANDLER_ERROR")

        if error:
            logger.debug("Ignored {}: {}", action.action_type.value, error)
            result = ActionResult.failure(error, error_code="INVALID_ACTION")
            if action.action_type == ActionType.MOVE and working.halt_travel:
                # Bumping a wall still turns the player to face it
                result.new_state = working
                result.halt_travel = True
            return result

        working.turn_number += 1
        return ActionResult.success_with_state(working)

    def _validate_action(self, state: GameState, action: Action) -> str | None:
        """
        Validate that an action is allowed in the current mode.

        Returns error message if invalid, None if valid.
        """
        if state.is_over:
            return "Game is over - no actions allowed"

        if state.mode == GameMode.EXPLORING:
            if action.action_type not in EXPLORATION_ACTIONS:
                return f"{action.action_type.value} is only allowed in combat"

        if state.mode == GameMode.COMBAT:
            if action.action_type not in COMBAT_ACTIONS:
                return f"{action.action_type.value} is not allowed in combat"
            if state.encounter is None or state.encounter.phase != CombatPhase.AWAITING_PLAYER_ACTION:
                return "Combat round still resolving"

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.MOVE: self._handle_move,
            ActionType.INTERACT: self._handle_interact,
            ActionType.SWITCH_BOT: self._handle_switch_bot,
            ActionType.SWAP_RESERVE: self._handle_swap_reserve,
            ActionType.EQUIP_SKILL: self._handle_equip_skill,
            ActionType.USE_ITEM: self._handle_use_item,
            ActionType.BUY_MODULE: self._handle_buy_module,
            ActionType.REPAIR: self._handle_repair,
            ActionType.COMBAT_SKILL: self._handle_combat_skill,
            ActionType.COMBAT_SHIELD: self._handle_combat_shield,
            ActionType.COMBAT_RECRUIT: self._handle_combat_recruit,
            ActionType.COMBAT_SWITCH: self._handle_combat_switch,
            ActionType.COMBAT_ITEM: self._handle_combat_item,
        }
        return handlers.get(action_type)

    # ------------------------------------------------------------------
    # Exploration
    # ------------------------------------------------------------------

    def _handle_move(self, state: GameState, payload: ActionPayload) -> str | None:
        return self.exploration.move(state, payload.dx, payload.dy)

    def _handle_interact(self, state: GameState, payload: ActionPayload) -> str | None:
        return self.exploration.interact(state)

    def _handle_switch_bot(self, state: GameState, payload: ActionPayload) -> str | None:
        if payload.index is None:
            return "Switch requires a slot index"
        return self.exploration.switch_active_bot(state, payload.index)

    def _handle_swap_reserve(self, state: GameState, payload: ActionPayload) -> str | None:
        return self.exploration.swap_reserve(state, payload.team_index, payload.reserve_index)

    def _handle_equip_skill(self, state: GameState, payload: ActionPayload) -> str | None:
        if not payload.skill_id:
            return "Equip requires a skill id"
        return self.exploration.equip_skill(state, payload.skill_id, payload.to_active)

    def _handle_use_item(self, state: GameState, payload: ActionPayload) -> str | None:
        if not payload.item_id:
            return "Use requires an item id"
        bot_index = state.player.active_slot if payload.bot_index is None else payload.bot_index
        return self.exploration.use_item(state, payload.item_id, bot_index)

    def _handle_buy_module(self, state: GameState, payload: ActionPayload) -> str | None:
        if not payload.module_id:
            return "Purchase requires a module id"
        return self.exploration.buy_module(state, payload.module_id)

    def _handle_repair(self, state: GameState, payload: ActionPayload) -> str | None:
        return self.exploration.repair_bot(state)

    # ------------------------------------------------------------------
    # Combat
    # ------------------------------------------------------------------

    def _handle_combat_skill(self, state: GameState, payload: ActionPayload) -> str | None:
        if not payload.skill_id:
            return "Combat skill requires a skill id"
        return self.combat.use_skill(state, payload.skill_id)

    def _handle_combat_shield(self, state: GameState, payload: ActionPayload) -> str | None:
        return self.combat.use_shield_module(state)

    def _handle_combat_recruit(self, state: GameState, payload: ActionPayload) -> str | None:
        return self.combat.recruit(state)

    def _handle_combat_switch(self, state: GameState, payload: ActionPayload) -> str | None:
        if payload.index is None:
            return "Switch requires a slot index"
        return self.combat.switch_bot(state, payload.index)

    def _handle_combat_item(self, state: GameState, payload: ActionPayload) -> str | None:
        if not payload.item_id:
            return "Use requires an item id"
        return self.combat.use_item(state, payload.item_id)


def apply_action(catalog: Catalog, state: GameState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(catalog=catalog)
    return reducer.apply(state, action)
