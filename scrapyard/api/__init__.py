"""
API Module - Framework-agnostic service and pydantic schemas.
"""

from .service import GameService, parse_combat_token, snapshot_from_session
from .schemas import CommandRequest, CommandResponse, CommandType, CreateSessionRequest, GameSnapshot

__all__ = [
    "GameService",
    "parse_combat_token",
    "snapshot_from_session",
    "CommandRequest",
    "CommandResponse",
    "CommandType",
    "CreateSessionRequest",
    "GameSnapshot",
]
