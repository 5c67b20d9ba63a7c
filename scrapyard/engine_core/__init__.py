"""
Engine Core - Deterministic world generation and game state transitions.

The engine is the runtime that:
1. Generates the world from coordinates (world, pathfinding)
2. Manages GameState
3. Generates legal actions
4. Applies actions via the reducer (exploration and combat)
5. Scores finished games
"""

from .state import (
    GameState, Player, Bot, Enemy, Item, Module, Position, WorldConfig,
    GameMode, CombatPhase, QuestStage, Terrain, POI, Facing, BotClass, Severity, LogEntry,
)
from .catalog import Catalog, SkillDefinition, SkillCategory, DamageType
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import Reducer, apply_action
from .action_generator import ActionGenerator, legal_actions
from .combat import CombatResolver, CombatTiming
from .exploration import ExplorationController, available_interaction
from .pathfinding import find_path
from .scoring import compute_score
from .world import terrain_at, poi_at, is_walkable, render_window
from .validation import validate_catalog, ValidationResult, CatalogValidationError

__all__ = [
    "GameState",
    "Player",
    "Bot",
    "Enemy",
    "Item",
    "Module",
    "Position",
    "WorldConfig",
    "GameMode",
    "CombatPhase",
    "QuestStage",
    "Terrain",
    "POI",
    "Facing",
    "BotClass",
    "Severity",
    "LogEntry",
    "Catalog",
    "SkillDefinition",
    "SkillCategory",
    "DamageType",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Reducer",
    "apply_action",
    "ActionGenerator",
    "legal_actions",
    "CombatResolver",
    "CombatTiming",
    "ExplorationController",
    "available_interaction",
    "find_path",
    "compute_score",
    "terrain_at",
    "poi_at",
    "is_walkable",
    "render_window",
    "validate_catalog",
    "ValidationResult",
    "CatalogValidationError",
]
