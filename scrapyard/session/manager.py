"""
Session Manager - Creates and manages game sessions.

Sessions are EPHEMERAL:
- In-memory only, no save/load
- One GameState per session, replaced on every applied action
- Removed from the manager when the game ends or is abandoned
"""

from __future__ import annotations
import time
import uuid

from loguru import logger

from ..content import create_default_catalog, setup_game
from ..engine_core.catalog import Catalog
from ..engine_core.reducer import Reducer
from ..engine_core.state import WorldConfig
from ..settings import Settings
from .game_session import GameSession


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with a shared catalog
    - Track active sessions
    - Clean up finished sessions
    """

    def __init__(self, catalog: Catalog | None = None, settings: Settings | None = None):
        self.catalog = catalog or create_default_catalog()
        self.settings = settings or Settings()
        self._sessions: dict[str, GameSession] = {}

    def create_session(
        self,
        seed: int | None = None,
        world: WorldConfig | None = None,
    ) -> GameSession:
        """
        Create a new game session.

        Args:
            seed: Random seed (falls back to the configured seed)
            world: Fixed world parameters (pod placed from the seed if not provided)

        Returns:
            New GameSession, exploring at the start position
        """
        session_id = str(uuid.uuid4())
        game_seed = seed if seed is not None else self.settings.seed
        state = setup_game(random_seed=game_seed, catalog=self.catalog, world=world)
        session = GameSession(
            session_id=session_id,
            state=state,
            reducer=Reducer(catalog=self.catalog, timing=self.settings.combat_timing()),
            settings=self.settings,
        )
        session.metadata["created_at"] = time.time()
        self._sessions[session_id] = session
        logger.info("Session {} created (seed={}, pod={})", session_id, game_seed, state.world.pod.key)
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> int | None:
        """
        End a session and drop it.

        Returns the final score if the game had finished.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return None
        session.cancel_travel()
        score = session.final_score()
        logger.info("Session {} ended ({}), score={}", session_id, reason, score)
        return score

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose game is still running."""
        return [
            sid for sid, session in self._sessions.items()
            if not session.state.is_over
        ]
