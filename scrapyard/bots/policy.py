"""
Bot Policy - Interface for autopilot decision-making.

A BotPolicy takes a game state and the legal actions and returns a decision.
Autopilots drive unattended play-throughs for the CLI and for soak tests.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import random
from typing import TYPE_CHECKING, Any

from .evaluator import EvaluationWeights, HeuristicEvaluator

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.reducer import Reducer
    from ..engine_core.state import GameState


@dataclass
class BotDecision:
    """
    A decision made by a policy.

    Contains:
    - The action to take
    - Explanation (for debugging)
    - Confidence in the decision
    """
    action: Action
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_actions: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for autopilot policies.

    Implementations range from random play to lookahead search.
    """

    @abstractmethod
    def select_action(self, state: GameState, legal_actions: list[Action]) -> BotDecision:
        """
        Select an action from the legal actions.

        Args:
            state: Current game state
            legal_actions: List of legal actions to choose from

        Returns:
            BotDecision with the selected action
        """

    def get_name(self) -> str:
        """Get the policy's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects actions uniformly at random.

    Used for:
    - Soak testing the engine
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(self, state: GameState, legal_actions: list[Action]) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        action = self.rng.choice(legal_actions)
        return BotDecision(
            action=action,
            explanation="Selected randomly",
            confidence=1.0 / len(legal_actions),
            evaluated_actions=len(legal_actions),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal action.

    Used for deterministic testing.
    """

    def select_action(self, state: GameState, legal_actions: list[Action]) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        return BotDecision(
            action=legal_actions[0],
            explanation="Selected first legal action",
            evaluated_actions=1,
        )


class GreedyPolicy(BotPolicy):
    """
    Greedy policy - 1-ply lookahead with the heuristic evaluator.

    Each legal action is applied to a copy of the state and the best
    resulting state wins. Ties are broken randomly so the autopilot
    keeps wandering while it searches for caches.
    """

    def __init__(
        self,
        reducer: Reducer,
        weights: EvaluationWeights | None = None,
        seed: int | None = None,
    ):
        self.reducer = reducer
        self.evaluator = HeuristicEvaluator(weights)
        self.rng = random.Random(seed)

    def select_action(self, state: GameState, legal_actions: list[Action]) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        best_score = float("-inf")
        best: list[Action] = []
        for action in legal_actions:
            result = self.reducer.apply(state, action)
            if not result.success:
                continue
            score = self.evaluator.evaluate(result.new_state).total_score
            if score > best_score:
                best_score = score
                best = [action]
            elif score == best_score:
                best.append(action)

        if not best:
            best = list(legal_actions)
        return BotDecision(
            action=self.rng.choice(best),
            explanation=f"Best of {len(legal_actions)} by heuristic ({len(best)} tied)",
            confidence=1.0 / len(best),
            evaluated_actions=len(legal_actions),
            best_score=best_score,
        )
