"""
API Service - Command surface between presentation layers and the engine.

The service:
1. Manages sessions
2. Parses string command tokens into typed actions (only here)
3. Formats snapshots and results as pydantic models

This layer is framework-agnostic: any host can call it directly.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from loguru import logger

from .schemas import (
    BotInfo,
    CommandRequest,
    CommandResponse,
    CommandType,
    CreateSessionRequest,
    EnemyInfo,
    ErrorCode,
    ErrorResponse,
    GameSnapshot,
    ItemInfo,
    LogEntryInfo,
    ModuleInfo,
    PlayerInfo,
    QuestInfo,
    StatsInfo,
)
from ..engine_core.action import Action, ActionResult
from ..engine_core.combat import SHIELD_MODULE_ACTION
from ..engine_core.state import Bot, LogEntry, Position, WorldConfig
from ..session import GameSession, SessionManager


RECRUIT_TOKEN = "RECRUIT"
SWITCH_PREFIX = "SWITCH:"
ITEM_PREFIX = "ITEM:"


def parse_combat_token(token: str) -> Action:
    """
    Parse a combat command token into an action.

    Tokens: a skill id, "SHIELD_MOD", "RECRUIT", "SWITCH:<index>",
    "ITEM:<item id>". Raises ValueError for malformed tokens.
    """
    token = token.strip()
    if not token:
        raise ValueError("Empty combat token")
    if token == SHIELD_MODULE_ACTION:
        return Action.combat_shield()
    if token == RECRUIT_TOKEN:
        return Action.combat_recruit()
    if token.startswith(SWITCH_PREFIX):
        raw = token[len(SWITCH_PREFIX):]
        try:
            return Action.combat_switch(int(raw))
        except ValueError:
            raise ValueError(f"Invalid switch slot: {raw!r}") from None
    if token.startswith(ITEM_PREFIX):
        item_id = token[len(ITEM_PREFIX):]
        if not item_id:
            raise ValueError("ITEM token needs an item id")
        return Action.combat_item(item_id)
    return Action.combat_skill(token)


def _optional_index(value: int | None) -> int | None:
    if value is None or value < 0:
        return None
    return value


def action_from_request(request: CommandRequest) -> Action | None:
    """Typed action for a request. NAVIGATE has none: it is a session-level command."""
    command = request.command
    if command == CommandType.MOVE:
        return Action.move(request.dx, request.dy)
    if command == CommandType.INTERACT:
        return Action.interact()
    if command == CommandType.SWITCH_BOT:
        return Action.switch_bot(request.index)
    if command == CommandType.SWAP_RESERVE:
        return Action.swap_reserve(
            _optional_index(request.team_index),
            _optional_index(request.reserve_index),
        )
    if command == CommandType.EQUIP_SKILL:
        return Action.equip_skill(request.skill_id, request.to_active)
    if command == CommandType.USE_ITEM:
        return Action.use_item(request.item_id, request.bot_index)
    if command == CommandType.BUY_MODULE:
        return Action.buy_module(request.module_id)
    if command == CommandType.REPAIR:
        return Action.repair()
    if command == CommandType.COMBAT:
        return parse_combat_token(request.token)
    return None


# =============================================================================
# Snapshot building
# =============================================================================

def _log_info(entry: LogEntry) -> LogEntryInfo:
    return LogEntryInfo(
        id=entry.id,
        message=entry.message,
        severity=entry.severity.value,
        delay_ms=entry.delay_ms,
    )


def _bot_info(bot: Bot) -> BotInfo:
    return BotInfo(
        id=bot.id,
        name=bot.name,
        bot_class=bot.bot_class.value,
        hp=bot.hp,
        max_hp=bot.max_hp,
        level=bot.level,
        xp=bot.xp,
        max_xp=bot.max_xp,
        temp_shield=bot.temp_shield,
        is_defeated=bot.is_defeated,
        personality=bot.personality,
        active_skills=list(bot.active_skills),
        stored_skills=list(bot.stored_skills),
        modules=[
            ModuleInfo(id=m.id, name=m.name, effect=m.effect_id.value, value=m.value)
            for m in bot.modules
        ],
    )


def snapshot_from_session(session: GameSession) -> GameSnapshot:
    """Build the observable snapshot of a session."""
    state = session.state
    player = state.player
    enemy = state.enemy
    stats = player.stats

    return GameSnapshot(
        session_id=session.session_id,
        mode=state.mode.value,
        quest_stage=player.quest.stage.value,
        input_locked=session.input_locked,
        is_traveling=session.is_traveling,
        message=state.message,
        interaction=session.interaction_label,
        pod_x=state.world.pod.x,
        pod_y=state.world.pod.y,
        player=PlayerInfo(
            x=player.position.x,
            y=player.position.y,
            facing=player.facing.value,
            scrap=player.scrap,
            active_slot=player.active_slot,
            team=[_bot_info(b) for b in player.team],
            reserves=[_bot_info(b) for b in player.reserves],
            inventory=[
                ItemInfo(id=i.id, name=i.name, effect=i.effect.value, count=i.count)
                for i in player.inventory
            ],
            quest=QuestInfo(
                stage=player.quest.stage.value,
                parts_found=player.quest.parts_found,
                parts_needed=player.quest.parts_needed,
                has_omni_tool=player.quest.has_omni_tool,
            ),
            stats=StatsInfo.model_validate(stats),
        ),
        enemy=EnemyInfo(
            enemy_type=enemy.enemy_type,
            name=enemy.name,
            enemy_class=enemy.enemy_class.value,
            hp=enemy.hp,
            max_hp=enemy.max_hp,
            is_boss=enemy.is_boss,
        ) if enemy else None,
        combat_log=[_log_info(e) for e in session.combat_log],
        score=session.final_score(),
    )


# =============================================================================
# Service
# =============================================================================

@dataclass
class GameService:
    """
    Main service for front ends.

    Usage:
        service = GameService()
        snapshot = service.create_session(CreateSessionRequest(seed=7))
        response = service.move(snapshot.session_id, 1, 0)
        service.advance(snapshot.session_id, 1000)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_session(self, request: CreateSessionRequest) -> GameSnapshot:
        world = None
        if request.pod_x is not None:
            world = WorldConfig(pod=Position(request.pod_x, request.pod_y))
        session = self.session_manager.create_session(seed=request.seed, world=world)
        return snapshot_from_session(session)

    def get_snapshot(self, session_id: str) -> GameSnapshot | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return snapshot_from_session(session)

    def submit(self, session_id: str, request: CommandRequest) -> CommandResponse:
        """Apply one command to a session."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return CommandResponse(
                success=False,
                error=f"Session {session_id} not found",
                error_code=ErrorCode.SESSION_NOT_FOUND,
            )

        if request.command == CommandType.NAVIGATE:
            result = session.navigate_to(request.x, request.y)
        else:
            try:
                action = action_from_request(request)
            except ValueError as e:
                return CommandResponse(
                    success=False,
                    error=str(e),
                    error_code=ErrorCode.VALIDATION_ERROR,
                    snapshot=snapshot_from_session(session),
                )
            result = session.submit(action)

        return self._result_to_response(session, result)

    def advance(self, session_id: str, ms: int) -> list[LogEntryInfo] | ErrorResponse:
        """Advance a session's clock, returning the events released."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return [_log_info(e) for e in session.advance(ms)]

    def end_session(self, session_id: str) -> int | None:
        return self.session_manager.end_session(session_id, reason="user_ended")

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    # Command shorthands

    def move(self, session_id: str, dx: int, dy: int) -> CommandResponse:
        return self.submit(session_id, CommandRequest(command=CommandType.MOVE, dx=dx, dy=dy))

    def navigate_to(self, session_id: str, x: int, y: int) -> CommandResponse:
        return self.submit(session_id, CommandRequest(command=CommandType.NAVIGATE, x=x, y=y))

    def interact(self, session_id: str) -> CommandResponse:
        return self.submit(session_id, CommandRequest(command=CommandType.INTERACT))

    def switch_active_bot(self, session_id: str, index: int) -> CommandResponse:
        return self.submit(session_id, CommandRequest(command=CommandType.SWITCH_BOT, index=index))

    def swap_reserve(self, session_id: str, team_index: int, reserve_index: int) -> CommandResponse:
        return self.submit(session_id, CommandRequest(
            command=CommandType.SWAP_RESERVE,
            team_index=team_index,
            reserve_index=reserve_index,
        ))

    def equip_skill(self, session_id: str, skill_id: str, to_active: bool) -> CommandResponse:
        return self.submit(session_id, CommandRequest(
            command=CommandType.EQUIP_SKILL, skill_id=skill_id, to_active=to_active,
        ))

    def use_item(self, session_id: str, item_id: str, bot_index: int) -> CommandResponse:
        return self.submit(session_id, CommandRequest(
            command=CommandType.USE_ITEM, item_id=item_id, bot_index=bot_index,
        ))

    def buy_module(self, session_id: str, module_id: str) -> CommandResponse:
        return self.submit(session_id, CommandRequest(command=CommandType.BUY_MODULE, module_id=module_id))

    def repair_bot(self, session_id: str) -> CommandResponse:
        return self.submit(session_id, CommandRequest(command=CommandType.REPAIR))

    def submit_combat_action(self, session_id: str, token: str) -> CommandResponse:
        return self.submit(session_id, CommandRequest(command=CommandType.COMBAT, token=token))

    # Helpers

    def _result_to_response(self, session: GameSession, result: ActionResult) -> CommandResponse:
        error_code = None
        if result.error_code:
            try:
                error_code = ErrorCode(result.error_code)
            except ValueError:
                logger.warning("Unknown error code from engine: {}", result.error_code)
                error_code = ErrorCode.INVALID_ACTION
        return CommandResponse(
            success=result.success,
            error=result.error,
            error_code=error_code,
            events=[_log_info(e) for e in result.events],
            lock_ms=result.lock_ms,
            snapshot=snapshot_from_session(session),
        )

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )
