"""
Session Module - Manages ephemeral game sessions.

A session represents one play-through:
- Created when a game starts
- Holds the current game state, the input lock and the virtual clock
- Walks planned routes one step per tick
- Dropped when the game ends

Sessions are EPHEMERAL: there is no persistence.
"""

from .game_session import GameSession
from .manager import SessionManager

__all__ = [
    "GameSession",
    "SessionManager",
]
