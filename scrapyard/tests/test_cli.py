"""
Tests for settings, logging setup and the command-line interface.
"""

import sys

from ..cli import main
from ..logging_setup import configure_logging
from ..settings import Settings


class TestSettings:

    def test_defaults(self):
        timing = Settings().combat_timing()
        assert timing.action_delay_ms == 800
        assert timing.enemy_attack_at_ms == 1800
        assert timing.boss_intro_delay_ms == 2000

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SCRAPYARD_ACTION_DELAY_MS", "500")
        monkeypatch.setenv("SCRAPYARD_SEED", "12")

        settings = Settings()

        assert settings.action_delay_ms == 500
        assert settings.seed == 12
        assert settings.combat_timing().enemy_attack_at_ms == 1500

    def test_configure_logging(self):
        configure_logging(Settings(log_level="debug"))


class TestCLI:

    def run(self, monkeypatch, *args):
        monkeypatch.setattr(sys, "argv", ["scrapyard", "--log-level", "ERROR", *args])
        main()

    def test_validate(self, monkeypatch, capsys):
        self.run(monkeypatch, "validate")
        assert "Valid: True" in capsys.readouterr().out

    def test_map(self, monkeypatch, capsys):
        self.run(monkeypatch, "map", "--seed", "4", "--radius", "2")
        lines = capsys.readouterr().out.strip().split("\n")
        assert lines[0].startswith("Pod at ")
        assert len(lines) == 6
        assert lines[1:] == [".....", ".....", ".....", ".....", "....@"]

    def test_autoplay(self, monkeypatch, capsys):
        self.run(monkeypatch, "autoplay", "--seed", "2", "--policy", "random", "--max-actions", "25")
        out = capsys.readouterr().out
        assert "Mode: " in out
        assert "Quest: " in out
