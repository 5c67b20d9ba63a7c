"""
Bots module - Autopilot policies.

Provides:
- BotPolicy: Interface for autopilot decision-making
- RandomPolicy, FirstLegalPolicy: Baselines
- GreedyPolicy: 1-ply lookahead with HeuristicEvaluator
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy, GreedyPolicy
from .evaluator import HeuristicEvaluator, EvaluationWeights, StateEvaluation

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "GreedyPolicy",
    "HeuristicEvaluator",
    "EvaluationWeights",
    "StateEvaluation",
]
