"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. Autopilot bots to enumerate possible moves
2. Presentation layers to show available commands
3. Tests (is this action in legal_actions?)

Design: Generates Action objects, not just action types.
This ensures all generated actions are fully specified.
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import Action
from .catalog import Catalog
from .exploration import REPAIR_COST, interaction_target
from .inventory import check_item_use
from .state import (
    MAX_ACTIVE_SKILLS, MAX_TEAM_SIZE, CombatPhase, Facing, GameMode, GameState, Terrain,
)
from .world import terrain_at


@dataclass
class ActionGenerator:
    """
    Generates legal actions for the current game state.

    Uses the Catalog to determine which skills, items and modules exist.
    """
    catalog: Catalog

    def generate(self, state: GameState) -> list[Action]:
        """
        Generate every legal action.

        Returns a list of fully-specified Action objects.
        """
        if state.is_over:
            return []

        if state.mode == GameMode.COMBAT:
            if state.encounter is None or state.encounter.phase != CombatPhase.AWAITING_PLAYER_ACTION:
                return []
            return self._generate_combat_actions(state)

        actions = []
        actions.extend(self._generate_move_actions(state))
        if interaction_target(state) is not None:
            actions.append(Action.interact())
        actions.extend(self._generate_camp_actions(state))
        return actions

    def _generate_move_actions(self, state: GameState) -> list[Action]:
        actions = []
        here = state.player.position
        for facing in Facing:
            dx, dy = facing.delta
            target = here.offset(dx, dy)
            if terrain_at(target.x, target.y, state.world) != Terrain.WALL:
                actions.append(Action.move(dx, dy))
        return actions

    def _generate_camp_actions(self, state: GameState) -> list[Action]:
        player = state.player
        bot = player.active_bot
        actions = []

        for idx, member in enumerate(player.team):
            if idx != player.active_slot and not member.is_defeated:
                actions.append(Action.switch_bot(idx))

        if len(player.team) > 1:
            for idx in range(len(player.team)):
                actions.append(Action.swap_reserve(idx, None))
        if len(player.team) < MAX_TEAM_SIZE:
            for idx in range(len(player.reserves)):
                actions.append(Action.swap_reserve(None, idx))

        for skill_id in bot.active_skills:
            actions.append(Action.equip_skill(skill_id, to_active=False))
        if len(bot.active_skills) < MAX_ACTIVE_SKILLS:
            for skill_id in bot.stored_skills:
                actions.append(Action.equip_skill(skill_id, to_active=True))

        for item in player.inventory:
            for idx, member in enumerate(player.team):
                if check_item_use(player, item.id, member) is None:
                    actions.append(Action.use_item(item.id, idx))

        for module in self.catalog.modules.values():
            if player.scrap >= module.cost and not bot.owns_module(module.id):
                actions.append(Action.buy_module(module.id))

        if player.scrap >= REPAIR_COST and not bot.is_defeated and bot.hp < bot.max_hp:
            actions.append(Action.repair())

        return actions

    def _generate_combat_actions(self, state: GameState) -> list[Action]:
        player = state.player
        bot = player.active_bot
        actions = [Action.combat_skill(skill_id) for skill_id in bot.active_skills]
        actions.append(Action.combat_shield())
        if not state.enemy.is_boss:
            actions.append(Action.combat_recruit())
        for idx, member in enumerate(player.team):
            if idx != player.active_slot and not member.is_defeated:
                actions.append(Action.combat_switch(idx))
        for item in player.inventory:
            if check_item_use(player, item.id, bot) is None:
                actions.append(Action.combat_item(item.id))
        return actions


def legal_actions(catalog: Catalog, state: GameState) -> list[Action]:
    """Convenience function to get legal actions."""
    generator = ActionGenerator(catalog=catalog)
    return generator.generate(state)
