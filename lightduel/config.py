"""
Application configuration.

Controls arena defaults, frame cadence, logging and the opponent tuning
service. All settings can be overridden via environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from lightduel.simulation.models import GameSettings


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass
class GameConfig:
    """Process-wide configuration for the game server."""

    # Arena defaults for new sessions
    arena_size: int = field(default_factory=lambda: _env_int("LIGHTDUEL_ARENA_SIZE", 40))
    game_speed: int = field(default_factory=lambda: _env_int("LIGHTDUEL_GAME_SPEED", 5))

    # Frame driver
    frame_interval_ms: int = field(
        default_factory=lambda: _env_int("LIGHTDUEL_FRAME_INTERVAL_MS", 16)
    )

    # Opponent tuning service
    tuning_api_key: Optional[str] = field(default_factory=lambda: os.getenv("GEMINI_API_KEY"))
    tuning_model: str = field(
        default_factory=lambda: os.getenv("LIGHTDUEL_TUNING_MODEL", "gemini-2.0-flash")
    )
    tuning_timeout: float = field(
        default_factory=lambda: _env_float("LIGHTDUEL_TUNING_TIMEOUT", 30.0)
    )

    log_level: str = field(default_factory=lambda: os.getenv("LIGHTDUEL_LOG_LEVEL", "INFO"))

    @classmethod
    def from_env(cls) -> "GameConfig":
        """Create config from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []
        try:
            self.default_settings()
        except ValueError as e:
            errors.append(str(e))
        if self.frame_interval_ms <= 0:
            errors.append("LIGHTDUEL_FRAME_INTERVAL_MS must be positive")
        if self.tuning_timeout <= 0:
            errors.append("LIGHTDUEL_TUNING_TIMEOUT must be positive")
        return errors

    @property
    def tuning_enabled(self) -> bool:
        return bool(self.tuning_api_key)

    def default_settings(self) -> GameSettings:
        """Game settings for a new session."""
        return GameSettings(arena_size=self.arena_size, speed=self.game_speed)


# Singleton config instance
_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the global configuration."""
    global _config
    if _config is None:
        _config = GameConfig.from_env()
    return _config


def set_config(config: Optional[GameConfig]) -> None:
    """
    Replace the global configuration.

    Useful for testing; pass None to reload from the environment.
    """
    global _config
    _config = config
