"""
Game Session - The single controller context for one play-through.

The session owns:
- The current canonical GameState (replaced wholesale after each action)
- A virtual clock, advanced explicitly by the host with advance(ms)
- The input lock, held while an action's timed events play out
- The path-traversal scheduler: one step per step_interval_ms, cancelled
  by any new player command, an encounter, a wall or incapacitation

Nothing here uses wall-clock time or threads. A host (UI loop, test,
autopilot) drives the clock and reads the released events.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Any
import heapq
import itertools

from loguru import logger

from ..engine_core.action import Action, ActionResult
from ..engine_core.exploration import available_interaction
from ..engine_core.pathfinding import find_path
from ..engine_core.reducer import Reducer
from ..engine_core.scoring import compute_score
from ..engine_core.state import GameMode, GameState, LogEntry, Position
from ..settings import Settings


@dataclass
class GameSession:
    """
    An ephemeral game session.

    Usage:
        session = manager.create_session(seed=7)
        session.submit(Action.move(1, 0))
        released = session.advance(1000)  # events due within the next second
    """
    session_id: str
    state: GameState
    reducer: Reducer
    settings: Settings = field(default_factory=Settings)

    # Virtual clock
    clock_ms: int = 0
    locked_until_ms: int = 0

    # Path traversal
    route: deque[Position] = field(default_factory=deque)
    next_step_at_ms: int | None = None

    # Applied actions, for replay
    history: list[Action] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self._pending: list[tuple[int, int, LogEntry]] = []
        self._sequence = itertools.count()
        self._released_ids: set[int] = set()
        self._outbox: list[LogEntry] = []

    # ------------------------------------------------------------------
    # Observables
    # ------------------------------------------------------------------

    @property
    def input_locked(self) -> bool:
        return self.clock_ms < self.locked_until_ms

    @property
    def is_traveling(self) -> bool:
        return bool(self.route)

    @property
    def mode(self) -> GameMode:
        return self.state.mode

    @property
    def combat_log(self) -> list[LogEntry]:
        """Combat log entries whose presentation time has come."""
        return [e for e in self.state.combat_log if e.id in self._released_ids]

    @property
    def interaction_label(self) -> str | None:
        return available_interaction(self.state)

    def final_score(self) -> int | None:
        """Score once the game has ended, None while it is still running."""
        if not self.state.is_over:
            return None
        return compute_score(self.state.player.stats, won=self.state.mode == GameMode.VICTORY)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def submit(self, action: Action) -> ActionResult:
        """Apply a player command. Any command cancels a route in progress."""
        return self._submit(action, from_route=False)

    def _submit(self, action: Action, from_route: bool) -> ActionResult:
        if self.input_locked:
            return ActionResult.failure("Input locked", error_code="INPUT_LOCKED")
        if not from_route:
            self.cancel_travel()

        result = self.reducer.apply(self.state, action)
        if result.new_state is not None:
            self.state = result.new_state
        if result.success:
            self.history.append(action)
        self._schedule(result)

        if result.halt_travel or self.state.mode != GameMode.EXPLORING:
            self.cancel_travel()
        return result

    def navigate_to(self, x: int, y: int) -> ActionResult:
        """Plan a route to (x, y) and start walking it on the virtual clock."""
        if self.input_locked:
            return ActionResult.failure("Input locked", error_code="INPUT_LOCKED")
        if self.state.mode != GameMode.EXPLORING:
            return ActionResult.failure("Can only travel while exploring", error_code="WRONG_MODE")

        self.cancel_travel()
        goal = Position(x, y)
        path = find_path(self.state.player.position, goal, self.state.world)
        if path is None:
            return ActionResult.failure(f"No path to {goal.key}", error_code="NO_PATH")

        self.route = deque(path)
        if self.route:
            self.next_step_at_ms = self.clock_ms + self.settings.step_interval_ms
            logger.debug("Route to {}: {} steps", goal.key, len(path))
        return ActionResult(success=True, new_state=self.state)

    def cancel_travel(self) -> None:
        self.route.clear()
        self.next_step_at_ms = None

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def advance(self, ms: int) -> list[LogEntry]:
        """
        Move the virtual clock forward.

        Takes route steps as they fall due and returns, in order, every
        event released since the previous advance. That includes the
        zero-delay events of commands submitted in between, which are
        already visible in combat_log and ActionResult.events.
        """
        end = self.clock_ms + ms

        while self.route and self.next_step_at_ms is not None and self.next_step_at_ms <= end:
            self.clock_ms = max(self.clock_ms, self.next_step_at_ms)
            self._release_due()
            if self.input_locked:
                self.next_step_at_ms = self.locked_until_ms
                continue
            self._take_step()

        self.clock_ms = max(self.clock_ms, end)
        self._release_due()
        released, self._outbox = self._outbox, []
        return released

    def settle(self) -> list[LogEntry]:
        """Advance until the input lock is released and no route remains."""
        released = self.advance(0)
        while self.input_locked or self.route:
            target = self.locked_until_ms if self.input_locked else self.next_step_at_ms
            released.extend(self.advance(max(0, target - self.clock_ms)))
        return released

    def _take_step(self) -> None:
        step = self.route.popleft()
        here = self.state.player.position
        result = self._submit(Action.move(step.x - here.x, step.y - here.y), from_route=True)
        if not result.success:
            self.cancel_travel()
        elif self.route:
            self.next_step_at_ms = self.clock_ms + self.settings.step_interval_ms
        else:
            self.next_step_at_ms = None

    def _schedule(self, result: ActionResult) -> None:
        for entry in result.events:
            heapq.heappush(self._pending, (self.clock_ms + entry.delay_ms, next(self._sequence), entry))
        self.locked_until_ms = max(self.locked_until_ms, self.clock_ms + result.lock_ms)
        # Zero-delay events are visible as soon as the action returns
        self._release_due()

    def _release_due(self) -> None:
        while self._pending and self._pending[0][0] <= self.clock_ms:
            _, _, entry = heapq.heappop(self._pending)
            self._released_ids.add(entry.id)
            self._outbox.append(entry)
