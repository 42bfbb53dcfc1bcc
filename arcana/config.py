"""
Configuration - Environment settings, rule constants and logging setup.

Environment:
    ARCANA_ENV          deployment name (default: development)
    ARCANA_SAVE_DIR     directory for JSON save files (default: ~/.arcana/saves)
    ARCANA_LOG_LEVEL    logging level name (default: INFO)
    ALLOWED_ORIGINS     comma separated CORS origins for the HTTP API (default: *)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import logging
import os

from .campaigns.goblin_wars.cards import BASIC_DECK

# Environment configuration
ARCANA_ENV = os.getenv("ARCANA_ENV", "development")
ARCANA_SAVE_DIR = os.getenv("ARCANA_SAVE_DIR", None)
ARCANA_LOG_LEVEL = os.getenv("ARCANA_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def default_save_dir() -> Path:
    """Save directory from the environment, or ~/.arcana/saves."""
    if ARCANA_SAVE_DIR:
        return Path(ARCANA_SAVE_DIR).expanduser()
    return Path.home() / ".arcana" / "saves"


def configure_logging(level: str | int | None = None):
    """Configure root logging for command line and server entry points."""
    level = level or ARCANA_LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)


@dataclass
class BattleRules:
    """
    Rule constants for a battle.

    The pacing values are hints attached to presentation events;
    the engine itself never waits.
    """
    hand_limit: int = 10
    draw_per_turn: int = 5
    basic_deck: list[str] = field(default_factory=lambda: list(BASIC_DECK))

    # Pacing hints (milliseconds)
    enemy_action_delay_ms: int = 1000
    multi_hit_interval_ms: int = 300
    game_over_delay_ms: int = 1500

    # Progression
    experience_per_level: int = 100
    level_up_health: int = 10
    level_up_mana: int = 1

    # Starting profile
    starting_max_health: int = 50
    starting_max_mana: int = 3
