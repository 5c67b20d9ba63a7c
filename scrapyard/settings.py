"""Configuration management using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from .engine_core.combat import CombatTiming


class Settings(BaseSettings):
    """Engine settings loaded from SCRAPYARD_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SCRAPYARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "WARNING"

    # Game seed (random if unset)
    seed: int | None = None

    # Presentation timing, in milliseconds
    step_interval_ms: int = 150
    action_delay_ms: int = 800
    enemy_attack_delay_ms: int = 1000
    boss_intro_delay_ms: int = 2000

    def combat_timing(self) -> CombatTiming:
        return CombatTiming(
            action_delay_ms=self.action_delay_ms,
            enemy_attack_delay_ms=self.enemy_attack_delay_ms,
            boss_intro_delay_ms=self.boss_intro_delay_ms,
        )

