"""
Configuration - Environment-driven settings and logging setup.

Environment variables:
    FIVESLIDE_ENV                 development | production (default: development)
    FIVESLIDE_LOG_LEVEL           logging level name (default: INFO)
    FIVESLIDE_BOT_DELAY           seconds a bot waits before acting (default: 0)
    FIVESLIDE_DEFAULT_DIFFICULTY  easy | medium | hard (default: medium)
    FIVESLIDE_BOT_SEED            integer seed for bot randomness (default: unset)
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import os

from .engine_core.state import Difficulty


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for sessions and the CLI."""
    env: str = "development"
    log_level: str = "INFO"
    bot_delay: float = 0.0
    default_difficulty: Difficulty = Difficulty.MEDIUM
    bot_seed: int | None = None


def get_settings() -> Settings:
    """
    Build settings from the environment.

    Raises ValueError for values that cannot be parsed.
    """
    seed = os.getenv("FIVESLIDE_BOT_SEED")
    bot_delay = float(os.getenv("FIVESLIDE_BOT_DELAY", "0"))
    if bot_delay < 0:
        raise ValueError(f"FIVESLIDE_BOT_DELAY must be >= 0, got {bot_delay}")

    return Settings(
        env=os.getenv("FIVESLIDE_ENV", "development"),
        log_level=os.getenv("FIVESLIDE_LOG_LEVEL", "INFO").upper(),
        bot_delay=bot_delay,
        default_difficulty=Difficulty(
            os.getenv("FIVESLIDE_DEFAULT_DIFFICULTY", Difficulty.MEDIUM.value).lower()
        ),
        bot_seed=int(seed) if seed else None,
    )


def configure_logging(level: str | int = "INFO") -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
