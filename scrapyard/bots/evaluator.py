"""
Heuristic Evaluator - Scores game states for autopilot decision-making.

The evaluator assigns a numeric score to game states based on:
- Progress features (quest stage, parts found, omni-tool)
- Squad features (operational bots, hp, shields, modules, loadout)
- Combat features (damage done to the current enemy)
- Navigation features (distance to the current objective)

Weights can be adjusted to create different play styles.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.state import GameMode, QuestStage

if TYPE_CHECKING:
    from ..engine_core.state import GameState


@dataclass
class EvaluationWeights:
    """
    Weights for the heuristic evaluator.

    Higher values = more importance.
    """
    # Progress
    quest_stage: float = 1000.0
    quest_part: float = 200.0

    # Squad
    operational_bot: float = 150.0
    hp_fraction: float = 60.0
    shield_point: float = 0.3
    module: float = 80.0
    loaded_skill: float = 5.0
    level: float = 40.0

    # Economy
    scrap: float = 0.5
    consumable: float = 10.0

    # Combat
    enemy_damage_fraction: float = 120.0

    # Navigation
    objective_distance: float = -3.0
    range_from_origin: float = 1.5  # Far caches are more likely to hold parts
    max_useful_range: float = 40.0


@dataclass
class StateEvaluation:
    """Result of evaluating a game state."""
    total_score: float
    feature_breakdown: dict[str, float] = field(default_factory=dict)


class HeuristicEvaluator:
    """
    Evaluates game states using weighted heuristics.

    Used for 1-ply lookahead:
    1. Generate legal actions
    2. Apply each action to get a new state
    3. Evaluate new states
    4. Select the action leading to the best state
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate(self, state: GameState) -> StateEvaluation:
        if state.mode == GameMode.VICTORY:
            return StateEvaluation(total_score=float("inf"))
        if state.mode == GameMode.GAME_OVER:
            return StateEvaluation(total_score=float("-inf"))

        w = self.weights
        player = state.player
        quest = player.quest
        features: dict[str, float] = {}

        features["quest_stage"] = quest.stage.order * w.quest_stage
        features["quest_part"] = quest.parts_found * w.quest_part

        alive = [b for b in player.team if not b.is_defeated]
        features["operational"] = len(alive) * w.operational_bot
        features["hp"] = sum(b.hp / b.max_hp for b in alive) * w.hp_fraction
        features["shield"] = sum(b.temp_shield for b in alive) * w.shield_point
        features["modules"] = sum(len(b.modules) for b in player.all_bots) * w.module
        features["levels"] = sum(b.level for b in player.all_bots) * w.level
        features["loadout"] = len(player.active_bot.active_skills) * w.loaded_skill

        features["scrap"] = player.scrap * w.scrap
        features["consumables"] = sum(i.count for i in player.inventory if i.is_consumable) * w.consumable

        enemy = state.enemy
        if enemy is not None and enemy.max_hp > 0:
            features["enemy_damage"] = (1 - enemy.hp / enemy.max_hp) * w.enemy_damage_fraction

        if quest.stage == QuestStage.GATHER_PARTS and not quest.parts_complete:
            reach = min(player.position.distance_to(state.world.origin), w.max_useful_range)
            features["range"] = reach * w.range_from_origin
        else:
            features["objective"] = player.position.distance_to(state.world.pod) * w.objective_distance

        return StateEvaluation(total_score=sum(features.values()), feature_breakdown=features)
