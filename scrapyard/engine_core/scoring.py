"""
Scoring - Final score from accumulated play statistics.
"""

from __future__ import annotations
import math

from .state import PlayerStats


WIN_BONUS = 5000
LOSS_PENALTY = -2000

SCORE_WEIGHTS = {
    "scrap_collected": 2,
    "bots_recruited": 150,
    "damage_dealt": 1,
    "healing_done": 0.5,
    "modules_installed": 100,
    "quests_completed": 500,
    "bots_lost": -250,
    "steps": -1,
}


def compute_score(stats: PlayerStats, won: bool) -> int:
    """Weighted sum of stats plus the win bonus or loss penalty, floored, never negative."""
    total = WIN_BONUS if won else LOSS_PENALTY
    for stat, weight in SCORE_WEIGHTS.items():
        total += getattr(stats, stat) * weight
    return max(0, math.floor(total))
