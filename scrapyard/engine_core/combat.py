"""
Combat Resolver - Turn-based encounter state machine.

Phases per round:

    AWAITING_PLAYER_ACTION
        -> RESOLVING_PLAYER_ACTION     (events at +0 ms)
        -> CHECKING_VICTORY            (events at +action_delay)
            -> VICTORY                 (terminal)
        -> ENEMY_ATTACK                (events at +action_delay +enemy_attack_delay)
            -> DEFEAT                  (terminal, whole squad offline)
        -> AWAITING_PLAYER_ACTION

A successful recruit ends the encounter in RECRUITED with no counter-attack.

Everything resolves synchronously on an already-cloned state. The delays are
presentation hints carried on each emitted LogEntry; the session holds its
input lock until the last one has elapsed.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Callable

from loguru import logger

from .catalog import Catalog, DamageType, SkillCategory, SkillDefinition
from .inventory import apply_item, check_item_use
from .progression import LevelUp, award_xp
from .state import (
    Bot, BotClass, CombatPhase, Encounter, Enemy, GameMode, GameState,
    ModuleEffect, Severity,
)


DAMAGE_PER_LEVEL = 3
DEFENSE_SHIELD_BASE = 30
DEFENSE_SHIELD_PER_LEVEL = 5
DEFAULT_SHIELD_MODULE = 20
SHIELD_MODULE_ACTION = "SHIELD_MOD"

ENEMY_BASE_DAMAGE = 8
ENEMY_DAMAGE_PER_LEVEL = 1.5

RECRUIT_MAX_CHANCE = 0.9
RECRUIT_SCALE = 1.5
RECRUIT_PERSONALITY = "Reformatted. Awaiting orders."

VICTORY_SCRAP_BONUS = 10
LOOT_CHANCE = 0.3

TYPE_EFFECTIVENESS: dict[tuple[DamageType, BotClass], float] = {
    (DamageType.KINETIC, BotClass.ASSAULT): 1.5,
    (DamageType.KINETIC, BotClass.TANK): 0.5,
    (DamageType.THERMAL, BotClass.TECH): 1.5,
    (DamageType.THERMAL, BotClass.ASSAULT): 0.5,
    (DamageType.ELECTRIC, BotClass.TANK): 1.5,
    (DamageType.ELECTRIC, BotClass.TECH): 0.5,
}

STANCE_MESSAGES = {
    "TARGET_LOCK": "Target Locked! (Crit chance up)",
}


@dataclass
class CombatTiming:
    """Presentation delays, in milliseconds."""
    action_delay_ms: int = 800
    enemy_attack_delay_ms: int = 1000
    boss_intro_delay_ms: int = 2000

    @property
    def enemy_attack_at_ms(self) -> int:
        return self.action_delay_ms + self.enemy_attack_delay_ms


# ============================================================================
# Formulas
# ============================================================================

def effectiveness(damage_type: DamageType, target: BotClass) -> float:
    return TYPE_EFFECTIVENESS.get((damage_type, target), 1.0)


def raw_damage(base: float, bot: Bot) -> int:
    """floor(base + level * 3 + DMG_BOOST)."""
    return math.floor(base + bot.level * DAMAGE_PER_LEVEL + bot.damage_bonus)


def final_damage(raw: int, multiplier: float) -> int:
    return math.floor(raw * multiplier)


def defense_shield(bot: Bot) -> int:
    return DEFENSE_SHIELD_BASE + bot.level * DEFENSE_SHIELD_PER_LEVEL


def recruit_chance(enemy: Enemy) -> float:
    """Grows with missing enemy hp, capped at 90%. Bosses cannot be recruited."""
    if enemy.is_boss or enemy.max_hp <= 0:
        return 0.0
    chance = (1 - enemy.hp / enemy.max_hp) * RECRUIT_SCALE
    return max(0.0, min(RECRUIT_MAX_CHANCE, chance))


def enemy_attack_damage(defender: Bot) -> int:
    return math.floor(ENEMY_BASE_DAMAGE + defender.level * ENEMY_DAMAGE_PER_LEVEL)


def victory_scrap(enemy: Enemy) -> int:
    return enemy.max_hp // 2 + VICTORY_SCRAP_BONUS


# ============================================================================
# Resolver
# ============================================================================

@dataclass
class CombatResolver:
    """
    Resolves player commands during an encounter.

    Every public command validates first and returns an error message
    without touching the state when the command is not allowed. Otherwise
    it resolves the full round on the given (already cloned) state and
    returns None.
    """
    catalog: Catalog
    timing: CombatTiming
    on_boss_defeated: Callable[[GameState], None] | None = None

    # ------------------------------------------------------------------
    # Encounter lifecycle
    # ------------------------------------------------------------------

    def start_encounter(self, state: GameState, enemy: Enemy, delay_ms: int = 0) -> None:
        state.mode = GameMode.COMBAT
        state.encounter = Encounter(enemy=enemy)
        state.combat_log = []
        state.halt_travel = True
        if enemy.is_boss:
            state.emit(
                "WARNING: CORE GUARDIAN DETECTED",
                Severity.DANGER,
                delay_ms=delay_ms,
                phase=CombatPhase.AWAITING_PLAYER_ACTION,
            )
        else:
            state.emit(
                f"ALERT: {enemy.name} approaching!",
                Severity.INFO,
                delay_ms=delay_ms,
                phase=CombatPhase.AWAITING_PLAYER_ACTION,
            )
        logger.debug("Encounter started: {} ({} hp)", enemy.enemy_type, enemy.hp)

    def spawn_boss(self, state: GameState) -> Enemy:
        return self.catalog.boss.spawn(state.player.active_bot.level)

    def _end_encounter(self, state: GameState, phase: CombatPhase) -> None:
        for bot in state.player.all_bots:
            bot.temp_shield = 0
        state.encounter = None
        state.mode = GameMode.GAME_OVER if phase == CombatPhase.DEFEAT else GameMode.EXPLORING
        logger.debug("Encounter ended: {}", phase.value)

    # ------------------------------------------------------------------
    # Player commands
    # ------------------------------------------------------------------

    def use_skill(self, state: GameState, skill_id: str) -> str | None:
        bot = state.player.active_bot
        skill = self.catalog.get_skill(skill_id)
        if skill is None:
            return f"Unknown skill: {skill_id}"
        if skill_id not in bot.active_skills:
            return f"{bot.name} has no {skill.name} loaded"
        if bot.is_defeated:
            return f"{bot.name} is offline"

        self._begin_round(state)
        state.player.stats.record_skill(skill_id)
        if skill.deals_damage:
            self._attack(state, bot, skill)
        elif skill.category == SkillCategory.DEFENSE:
            self._raise_shield(state, bot, defense_shield(bot), "Shields raised")
        elif skill.heal > 0:
            restored = bot.heal(skill.heal)
            state.player.stats.healing_done += restored
            self._player_event(state, f"Emergency repairs complete (+{restored} HP).", Severity.GAIN)
        else:
            message = STANCE_MESSAGES.get(skill_id, f"{bot.name} used {skill.name}.")
            self._player_event(state, message, Severity.PLAYER)
        self._finish_round(state)
        return None

    def use_shield_module(self, state: GameState) -> str | None:
        bot = state.player.active_bot
        if bot.is_defeated:
            return f"{bot.name} is offline"

        self._begin_round(state)
        state.player.stats.record_skill(SHIELD_MODULE_ACTION)
        value = bot.module_value(ModuleEffect.SHIELD) or DEFAULT_SHIELD_MODULE
        self._raise_shield(state, bot, value, "Shields up")
        self._finish_round(state)
        return None

    def recruit(self, state: GameState) -> str | None:
        enemy = state.enemy
        if enemy.is_boss:
            return "The Guardian cannot be reprogrammed"

        self._begin_round(state)
        recruiter = state.player.active_bot
        if state.rng.random() < recruit_chance(enemy):
            self._player_event(state, "HACK SUCCESSFUL! Enemy rebooted.", Severity.GAIN)
            self._complete_recruit(state, enemy, recruiter)
            return None

        self._player_event(state, "Recruit Failed! Firewall too strong.", Severity.DANGER)
        self._finish_round(state)
        return None

    def switch_bot(self, state: GameState, index: int) -> str | None:
        player = state.player
        if not 0 <= index < len(player.team):
            return f"No bot in slot {index}"
        if index == player.active_slot:
            return f"{player.team[index].name} is already active"
        if player.team[index].is_defeated:
            return f"{player.team[index].name} is offline"

        self._begin_round(state)
        player.active_slot = index
        self._player_event(state, f"Switched to {player.active_bot.name}.", Severity.INFO)
        self._finish_round(state)
        return None

    def use_item(self, state: GameState, item_id: str) -> str | None:
        player = state.player
        bot = player.active_bot
        error = check_item_use(player, item_id, bot)
        if error:
            return error

        self._begin_round(state)
        outcome = apply_item(player, item_id, bot, self.catalog)
        self._player_event(state, f"Used {outcome.item_name}", Severity.INFO)
        self._report_level_ups(state, outcome.level_ups, 0, CombatPhase.RESOLVING_PLAYER_ACTION)
        self._finish_round(state)
        return None

    # ------------------------------------------------------------------
    # Round resolution
    # ------------------------------------------------------------------

    def _begin_round(self, state: GameState) -> None:
        state.encounter.phase = CombatPhase.RESOLVING_PLAYER_ACTION

    def _player_event(self, state: GameState, message: str, severity: Severity) -> None:
        state.emit(message, severity, delay_ms=0, phase=CombatPhase.RESOLVING_PLAYER_ACTION)

    def _attack(self, state: GameState, bot: Bot, skill: SkillDefinition) -> None:
        rng = state.rng
        if skill.success_chance < 1.0:
            if rng.random() >= skill.success_chance:
                self._player_event(state, "Hack failed!", Severity.PLAYER)
                return
            self._player_event(state, "Hack successful!", Severity.PLAYER)

        base: float = skill.power
        if skill.power_max is not None:
            base = rng.uniform(skill.power, skill.power_max)

        multiplier = effectiveness(skill.damage_type, state.enemy.enemy_class)
        dmg = final_damage(raw_damage(base, bot), multiplier)
        if dmg <= 0:
            return

        enemy = state.enemy
        dealt = min(dmg, enemy.hp)
        enemy.hp = max(0, enemy.hp - dmg)
        state.player.stats.damage_dealt += dealt
        self._player_event(state, f"{bot.name} used {skill.name} for {dmg} dmg!", Severity.PLAYER)
        if multiplier > 1.0:
            self._player_event(state, "It's super effective!", Severity.PLAYER)
        elif multiplier < 1.0:
            self._player_event(state, "It's not very effective...", Severity.INFO)

    def _raise_shield(self, state: GameState, bot: Bot, value: int, label: str) -> None:
        bot.temp_shield += value
        self._player_event(state, f"{label} (+{value}).", Severity.GAIN)

    def _finish_round(self, state: GameState) -> None:
        """Victory check, then the enemy's counter-attack."""
        encounter = state.encounter
        encounter.phase = CombatPhase.CHECKING_VICTORY
        if encounter.enemy.hp <= 0:
            self._victory(state, encounter.enemy)
            return

        encounter.phase = CombatPhase.ENEMY_ATTACK
        if self._enemy_attack(state, encounter.enemy):
            encounter.phase = CombatPhase.AWAITING_PLAYER_ACTION
            encounter.round += 1

    def _victory(self, state: GameState, enemy: Enemy) -> None:
        player = state.player
        at = self.timing.action_delay_ms
        phase = CombatPhase.VICTORY

        if enemy.is_boss:
            state.emit("GUARDIAN DEFEATED! OMNI-TOOL ACQUIRED.", Severity.GAIN, at, phase)

        scrap = victory_scrap(enemy)
        player.scrap += scrap
        player.stats.scrap_collected += scrap
        state.emit(f"Victory! +{scrap} Scrap, +{enemy.xp_value} XP.", Severity.GAIN, at, phase)

        if state.rng.random() < LOOT_CHANCE:
            loot = self.catalog.loot_table()
            if loot:
                drop = state.rng.choice(loot)
                player.add_item(self.catalog.new_item(drop.id))
                state.emit(f"Found item: {drop.name}", Severity.GAIN, at, phase)

        bot = player.active_bot
        level_ups = award_xp(bot, enemy.xp_value, self.catalog)
        self._report_level_ups(state, level_ups, at, phase)

        repair = bot.module_value(ModuleEffect.AUTO_REPAIR)
        if repair:
            player.stats.healing_done += bot.heal(repair)

        self._end_encounter(state, phase)
        if enemy.is_boss and self.on_boss_defeated is not None:
            self.on_boss_defeated(state)

    def _report_level_ups(
        self,
        state: GameState,
        level_ups: list[LevelUp],
        delay_ms: int,
        phase: CombatPhase,
    ) -> None:
        for level_up in level_ups:
            state.emit("LEVEL UP! Fully Repaired.", Severity.GAIN, delay_ms, phase)
            if level_up.learned:
                name = self.catalog.get_skill(level_up.learned).name
                state.emit(f"Learned: {name}", Severity.GAIN, delay_ms, phase)

    def _enemy_attack(self, state: GameState, enemy: Enemy) -> bool:
        """Resolve the counter-attack. Returns False if the squad was wiped out."""
        player = state.player
        at = self.timing.enemy_attack_at_ms
        phase = CombatPhase.ENEMY_ATTACK

        bot = player.active_bot
        dmg = enemy_attack_damage(bot)
        state.emit(f"{enemy.name} attacks for {dmg} dmg.", Severity.ENEMY, at, phase)
        absorbed, lost = bot.take_damage(dmg)
        player.stats.damage_taken += lost
        if absorbed:
            state.emit(f"Shield absorbed {absorbed} dmg.", Severity.INFO, at, phase)

        if not bot.is_defeated:
            return True

        player.stats.bots_lost += 1
        state.emit(f"{bot.name} has been defeated!", Severity.ENEMY, at, phase)
        next_slot = player.first_alive_slot()
        if next_slot is not None:
            player.active_slot = next_slot
            state.emit(
                f"WARNING: Unit Down. Switching to {player.active_bot.name}...",
                Severity.DANGER, at, phase,
            )
            return True

        state.emit("All units offline. GAME OVER.", Severity.DANGER, at, CombatPhase.DEFEAT)
        self._end_encounter(state, CombatPhase.DEFEAT)
        return False

    def _complete_recruit(self, state: GameState, enemy: Enemy, recruiter: Bot) -> None:
        template = self.catalog.bot_classes[enemy.enemy_class]
        bot = Bot(
            id=state.new_entity_id("bot"),
            name=f"{enemy.name.split(' ')[0]} Unit",
            bot_class=enemy.enemy_class,
            hp=enemy.max_hp // 2,
            base_max_hp=enemy.max_hp,
            level=recruiter.level,
            max_xp=100 * recruiter.level,
            active_skills=list(template.starting_skills),
            personality=RECRUIT_PERSONALITY,
        )
        player = state.player
        joined = player.add_recruit(bot)
        player.stats.bots_recruited += 1
        state.emit(
            "Joined Squad!" if joined else "Sent to Base Camp.",
            Severity.GAIN,
            self.timing.action_delay_ms,
            CombatPhase.RECRUITED,
        )
        logger.debug("Recruited {} ({})", bot.name, bot.bot_class.value)
        self._end_encounter(state, CombatPhase.RECRUITED)
