"""
Tests for final scoring.
"""

from ..engine_core.scoring import compute_score
from ..engine_core.state import PlayerStats


class TestComputeScore:

    def test_win(self):
        stats = PlayerStats(
            steps=200,
            damage_dealt=50,
            healing_done=21,
            scrap_collected=100,
            bots_recruited=1,
            bots_lost=1,
            modules_installed=1,
            quests_completed=4,
        )
        # 5000 + 200 + 150 + 50 + 10.5 + 100 + 2000 - 250 - 200, floored
        assert compute_score(stats, won=True) == 7060

    def test_loss_is_clamped_at_zero(self):
        assert compute_score(PlayerStats(), won=False) == 0

    def test_loss_with_progress(self):
        stats = PlayerStats(quests_completed=2, scrap_collected=1000, steps=500)
        assert compute_score(stats, won=False) == 1000 + 2000 - 500 - 2000
