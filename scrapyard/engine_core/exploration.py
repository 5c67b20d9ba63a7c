"""
Exploration Controller - Movement, hazards, POIs, camp and the quest chain.

Quest chain (monotonic, each step counts as one completed quest):

    FIND_POD        first pod interaction
    GATHER_PARTS    parts installed at the pod, or stepping next to the guardian
    DEFEAT_GUARDIAN guardian destroyed in combat
    REPAIR_POD      pod interaction while holding the omni-tool
    COMPLETED       mode becomes VICTORY

Like the combat resolver, every public command validates first and returns
an error message without touching the state, or mutates the given
(already cloned) state and returns None.
"""

from __future__ import annotations
from dataclasses import dataclass

from loguru import logger

from .catalog import Catalog
from .combat import CombatResolver
from .inventory import apply_item, check_item_use
from .progression import LevelUp
from .state import (
    MAX_ACTIVE_SKILLS, MAX_TEAM_SIZE, POI, Bot, BotClass, Enemy, Facing, GameMode,
    GameState, ModuleEffect, Position, QuestStage, Severity, Terrain,
)
from .world import poi_at, terrain_at


ACID_DAMAGE = 10

ENCOUNTER_CHANCE = 0.08
SCANNER_FACTOR = 0.6
POD_SAFE_DISTANCE = 5.0

GUARDIAN_TRIGGER_RANGE = 1
QUEST_PART_DISTANCE = 50.0

CACHE_SCRAP_MIN = 20
CACHE_SCRAP_MAX = 69

DERELICT_COST = 50
DERELICT_SALVAGE = 15
DERELICT_CLASSES = (BotClass.ASSAULT, BotClass.TANK, BotClass.TECH)

REPAIR_COST = 15
REPAIR_AMOUNT = 20

INTERACTION_LABELS = {
    POI.CACHE: "Open Cache",
    POI.DERELICT: "Repair Derelict",
    POI.NPC: "Talk",
    POI.GUARDIAN: "Engage Guardian",
}

POD_LABELS = {
    QuestStage.FIND_POD: "Inspect Escape Pod",
    QuestStage.GATHER_PARTS: "Install Parts",
    QuestStage.DEFEAT_GUARDIAN: "Inspect Escape Pod",
    QuestStage.REPAIR_POD: "Launch Escape Pod",
    QuestStage.COMPLETED: "Escape Pod",
}


# ============================================================================
# Queries
# ============================================================================

def _is_active_poi(state: GameState, pos: Position, poi: POI) -> bool:
    if poi == POI.NONE:
        return False
    return poi == POI.POD or not state.player.is_visited(pos)


def interaction_target(state: GameState) -> tuple[Position, POI] | None:
    """
    The tile an interact command would act on.

    Own tile first, then the faced tile, then the four neighbors in the
    order up, right, down, left.
    """
    player = state.player
    here = player.position
    candidates = [here, here.offset(*player.facing.delta)] + here.neighbors()
    for pos in candidates:
        poi = poi_at(pos.x, pos.y, state.world)
        if _is_active_poi(state, pos, poi):
            return pos, poi
    return None


def available_interaction(state: GameState) -> str | None:
    """Label for the interaction currently in reach, if any."""
    if state.mode != GameMode.EXPLORING:
        return None
    target = interaction_target(state)
    if target is None:
        return None
    _, poi = target
    if poi == POI.POD:
        return POD_LABELS[state.player.quest.stage]
    return INTERACTION_LABELS[poi]


def guardian_ready(state: GameState) -> bool:
    """Whether approaching the guardian should start the boss fight."""
    quest = state.player.quest
    if state.player.is_visited(state.world.guardian):
        return False
    if quest.stage == QuestStage.DEFEAT_GUARDIAN:
        return True
    return quest.stage == QuestStage.GATHER_PARTS and quest.parts_complete


def advance_quest(state: GameState, stage: QuestStage) -> None:
    """Move the quest forward. Stages never go backwards or repeat."""
    quest = state.player.quest
    if stage.order <= quest.stage.order:
        raise ValueError(f"Quest cannot move from {quest.stage.value} to {stage.value}")
    logger.debug("Quest stage {} -> {}", quest.stage.value, stage.value)
    quest.stage = stage
    state.player.stats.quests_completed += 1


# ============================================================================
# Controller
# ============================================================================

@dataclass
class ExplorationController:
    catalog: Catalog
    combat: CombatResolver

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def move(self, state: GameState, dx: int, dy: int) -> str | None:
        if abs(dx) + abs(dy) != 1:
            return f"Invalid step ({dx}, {dy})"

        player = state.player
        target = player.position.offset(dx, dy)
        player.facing = Facing.from_delta(dx, dy)

        terrain = terrain_at(target.x, target.y, state.world)
        if terrain == Terrain.WALL:
            state.halt_travel = True
            return "Path blocked."

        player.position = target
        player.stats.steps += 1

        if terrain == Terrain.ACID_POOL:
            self._acid_damage(state)
            # A unit disabled on this step ends the step, even if another took over
            if state.halt_travel:
                return None

        if guardian_ready(state) and target.chebyshev_to(state.world.guardian) <= GUARDIAN_TRIGGER_RANGE:
            self.engage_guardian(state)
            return None

        chance = self.encounter_chance(state, target)
        if chance > 0 and state.rng.random() < chance:
            self.combat.start_encounter(state, self.generate_enemy(state))
        return None

    def _acid_damage(self, state: GameState) -> None:
        player = state.player
        bot = player.active_bot
        if bot.is_defeated:
            return
        before = bot.hp
        bot.set_hp(bot.hp - ACID_DAMAGE)
        player.stats.damage_taken += before - bot.hp

        if not bot.is_defeated:
            state.notify("WARNING: Corrosive Environment Detected.", Severity.DANGER)
            return

        player.stats.bots_lost += 1
        state.halt_travel = True
        state.notify("DANGER: Acid Damage! Unit Disabled.", Severity.DANGER)
        next_slot = player.first_alive_slot()
        if next_slot is None:
            state.mode = GameMode.GAME_OVER
            state.emit("All units offline. GAME OVER.", Severity.DANGER)
            logger.debug("Squad lost to acid at {}", player.position.key)
            return
        player.active_slot = next_slot
        state.emit(f"WARNING: Unit Down. Switching to {player.active_bot.name}...", Severity.DANGER)

    def encounter_chance(self, state: GameState, pos: Position) -> float:
        bot = state.player.active_bot
        if bot.is_defeated:
            return 0.0
        if pos.distance_to(state.world.pod) < POD_SAFE_DISTANCE:
            return 0.0
        if bot.has_module(ModuleEffect.SCANNER):
            return ENCOUNTER_CHANCE * SCANNER_FACTOR
        return ENCOUNTER_CHANCE

    def generate_enemy(self, state: GameState) -> Enemy:
        """Weighted draw from the spawn table for the active bot's level."""
        level = state.player.active_bot.level
        table = self.catalog.enemy_table(level)
        total_weight = sum(entry.weight for entry in table)
        draw = state.rng.randrange(total_weight)
        cumulative = 0
        for entry in table:
            cumulative += entry.weight
            if draw < cumulative:
                return entry.spawn(level)
        raise RuntimeError("enemy selection failed despite non-empty spawn table")

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def interact(self, state: GameState) -> str | None:
        target = interaction_target(state)
        if target is None:
            return "Nothing to interact with."
        pos, poi = target

        if poi == POI.POD:
            self._interact_pod(state)
        elif poi == POI.GUARDIAN:
            if not guardian_ready(state):
                return "The Guardian is dormant. Power the pod first."
            self.engage_guardian(state)
        elif poi == POI.CACHE:
            self._open_cache(state, pos)
        elif poi == POI.NPC:
            hint = state.rng.choice(self.catalog.npc_hints) if self.catalog.npc_hints else "..."
            state.player.mark_visited(pos)
            state.notify(f'NPC: "{hint}"', Severity.INFO)
        elif poi == POI.DERELICT:
            self._repair_derelict(state, pos)
        return None

    def _interact_pod(self, state: GameState) -> None:
        quest = state.player.quest
        if quest.stage == QuestStage.FIND_POD:
            state.notify(
                f"Pod Systems Critical. Needs {quest.parts_needed} Hyperdrive Flux parts.",
                Severity.INFO,
            )
            advance_quest(state, QuestStage.GATHER_PARTS)
        elif quest.stage == QuestStage.GATHER_PARTS:
            if quest.parts_complete:
                state.notify(
                    "Parts Installed. GUARDIAN SIGNAL DETECTED. PREPARE FOR COMBAT.",
                    Severity.DANGER,
                )
                self.engage_guardian(state)
            else:
                state.notify(
                    f"Needs Hyperdrive Flux. Found: {quest.parts_found}/{quest.parts_needed}",
                    Severity.INFO,
                )
        elif quest.stage == QuestStage.DEFEAT_GUARDIAN:
            state.notify("The Guardian blocks the launch sequence!", Severity.DANGER)
        elif quest.stage == QuestStage.REPAIR_POD:
            if quest.has_omni_tool:
                advance_quest(state, QuestStage.COMPLETED)
                state.mode = GameMode.VICTORY
                state.halt_travel = True
                state.notify("Launch sequence initiated. The Escape Pod has launched.", Severity.GAIN)
            else:
                state.notify("Need Omni-Tool to initiate launch.", Severity.INFO)

    def _open_cache(self, state: GameState, pos: Position) -> None:
        player = state.player
        quest = player.quest
        player.mark_visited(pos)

        if quest.stage == QuestStage.GATHER_PARTS and not quest.parts_complete:
            distance = pos.distance_to(state.world.origin)
            if state.rng.random() < distance / QUEST_PART_DISTANCE:
                quest.parts_found += 1
                player.add_item(self.catalog.new_item(self.catalog.quest_part_id))
                state.notify(
                    f"Found Hyperdrive Flux! ({quest.parts_found}/{quest.parts_needed})",
                    Severity.GAIN,
                )
                return

        scrap = state.rng.randint(CACHE_SCRAP_MIN, CACHE_SCRAP_MAX)
        player.scrap += scrap
        player.stats.scrap_collected += scrap
        state.notify(f"Cache opened: Found {scrap} Scrap!", Severity.GAIN)

    def _repair_derelict(self, state: GameState, pos: Position) -> None:
        player = state.player
        player.mark_visited(pos)

        if player.scrap < DERELICT_COST:
            player.scrap += DERELICT_SALVAGE
            player.stats.scrap_collected += DERELICT_SALVAGE
            state.notify(
                f"Need {DERELICT_COST} Scrap to repair. Salvaged parts instead.",
                Severity.INFO,
            )
            return

        rng = state.rng
        template = self.catalog.bot_classes[rng.choice(DERELICT_CLASSES)]
        bot = Bot(
            id=state.new_entity_id("bot"),
            name=rng.choice(self.catalog.unique_names),
            bot_class=template.bot_class,
            hp=template.hp,
            base_max_hp=template.hp,
            active_skills=list(template.starting_skills),
            personality=rng.choice(self.catalog.personalities) if self.catalog.personalities else "",
        )
        player.scrap -= DERELICT_COST
        player.stats.bots_recruited += 1
        if player.add_recruit(bot):
            state.notify(f"Recruited {bot.name}. Joined squad!", Severity.GAIN)
        else:
            state.notify(f"Recruited {bot.name}. Sent to Base Camp.", Severity.GAIN)

    def engage_guardian(self, state: GameState) -> None:
        """Install collected parts if needed, then start the boss fight."""
        player = state.player
        if player.quest.stage == QuestStage.GATHER_PARTS:
            part = player.find_item(self.catalog.quest_part_id)
            if part:
                player.consume_item(part.id, part.count)
            advance_quest(state, QuestStage.DEFEAT_GUARDIAN)
        boss = self.combat.spawn_boss(state)
        self.combat.start_encounter(state, boss, delay_ms=self.combat.timing.boss_intro_delay_ms)

    def complete_guardian(self, state: GameState) -> None:
        """Boss defeated: hand over the omni-tool and unlock the launch."""
        player = state.player
        player.mark_visited(state.world.guardian)
        player.add_item(self.catalog.new_item(self.catalog.omni_tool_id))
        player.quest.has_omni_tool = True
        advance_quest(state, QuestStage.REPAIR_POD)

    # ------------------------------------------------------------------
    # Camp management
    # ------------------------------------------------------------------

    def switch_active_bot(self, state: GameState, index: int) -> str | None:
        team = state.player.team
        if not 0 <= index < len(team):
            return f"No bot in slot {index}"
        if team[index].is_defeated:
            return f"{team[index].name} is offline"
        state.player.active_slot = index
        return None

    def swap_reserve(
        self,
        state: GameState,
        team_index: int | None,
        reserve_index: int | None,
    ) -> str | None:
        """
        Move bots between squad and base camp.

        team only: bench that bot. reserve only: deploy that bot.
        both: exchange them.
        """
        player = state.player
        if team_index is not None and not 0 <= team_index < len(player.team):
            return f"No bot in slot {team_index}"
        if reserve_index is not None and not 0 <= reserve_index < len(player.reserves):
            return f"No bot in reserve slot {reserve_index}"

        team = list(player.team)
        reserves = list(player.reserves)
        active_id = player.active_bot.id

        if team_index is not None and reserve_index is not None:
            team[team_index], reserves[reserve_index] = reserves[reserve_index], team[team_index]
        elif team_index is not None:
            if len(team) <= 1:
                return "Cannot send last bot to reserves!"
            reserves.append(team.pop(team_index))
        elif reserve_index is not None:
            if len(team) >= MAX_TEAM_SIZE:
                return f"Squad full (Max {MAX_TEAM_SIZE})."
            team.append(reserves.pop(reserve_index))
        else:
            return "Nothing to swap"

        if all(bot.is_defeated for bot in team):
            return "Squad needs at least one operational bot."

        player.team = team
        player.reserves = reserves
        player.active_slot = next(
            (idx for idx, bot in enumerate(team) if bot.id == active_id),
            player.first_alive_slot(),
        )
        if player.active_bot.is_defeated:
            player.active_slot = player.first_alive_slot()
        return None

    def equip_skill(self, state: GameState, skill_id: str, to_active: bool) -> str | None:
        bot = state.player.active_bot
        if to_active:
            if skill_id not in bot.stored_skills:
                return f"{skill_id} is not in storage"
            if len(bot.active_skills) >= MAX_ACTIVE_SKILLS:
                return f"Skill RAM full (Max {MAX_ACTIVE_SKILLS})."
            bot.stored_skills.remove(skill_id)
            bot.active_skills.append(skill_id)
        else:
            if skill_id not in bot.active_skills:
                return f"{skill_id} is not loaded"
            bot.active_skills.remove(skill_id)
            bot.stored_skills.append(skill_id)
        return None

    def use_item(self, state: GameState, item_id: str, bot_index: int) -> str | None:
        player = state.player
        if not 0 <= bot_index < len(player.team):
            return f"No bot in slot {bot_index}"
        bot = player.team[bot_index]
        error = check_item_use(player, item_id, bot)
        if error:
            return error

        outcome = apply_item(player, item_id, bot, self.catalog)
        state.notify(f"Used {outcome.item_name} on {bot.name}.", Severity.GAIN)
        self._report_level_ups(state, outcome.level_ups)
        return None

    def _report_level_ups(self, state: GameState, level_ups: list[LevelUp]) -> None:
        for level_up in level_ups:
            state.emit("LEVEL UP! Fully Repaired.", Severity.GAIN)
            if level_up.learned:
                state.emit(f"Learned: {self.catalog.get_skill(level_up.learned).name}", Severity.GAIN)

    def buy_module(self, state: GameState, module_id: str) -> str | None:
        player = state.player
        bot = player.active_bot
        module = self.catalog.get_module(module_id)
        if module is None:
            return f"Unknown module: {module_id}"
        if bot.owns_module(module_id):
            return f"{bot.name} already has {module.name}"
        if player.scrap < module.cost:
            return f"Not enough scrap ({player.scrap}/{module.cost})."

        player.scrap -= module.cost
        bot.modules.append(self.catalog.new_module(module_id))
        player.stats.modules_installed += 1
        state.notify(f"Installed {module.name} on {bot.name}.", Severity.GAIN)
        return None

    def repair_bot(self, state: GameState) -> str | None:
        player = state.player
        bot = player.active_bot
        if bot.is_defeated:
            return f"{bot.name} is offline. Use a revive item."
        if bot.hp >= bot.max_hp:
            return f"{bot.name} needs no repairs"
        if player.scrap < REPAIR_COST:
            return f"Not enough scrap ({player.scrap}/{REPAIR_COST})."

        player.scrap -= REPAIR_COST
        restored = bot.heal(REPAIR_AMOUNT)
        player.stats.healing_done += restored
        state.notify(f"Repaired {bot.name} (+{restored} HP).", Severity.GAIN)
        return None
