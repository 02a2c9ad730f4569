"""
Configuration management for Loadout.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


def _parse_list(value: str) -> Tuple[str, ...]:
    """Parse 'a,b,c' string into a tuple of stripped, non-empty items."""
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(',') if item.strip())


def _parse_optional_int(value: str) -> Optional[int]:
    """Parse an integer string, or None if empty/invalid."""
    if not value:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class DatabaseConfig:
    """Database configuration."""
    url: str = os.getenv('DATABASE_URL', 'sqlite:///loadout.db')

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith('sqlite')


@dataclass(frozen=True)
class FatigueConfig:
    """Simulated fatigue index settings."""
    hours_scale: float = float(os.getenv('FATIGUE_HOURS_SCALE', '10000'))
    factor_min: float = 0.8
    factor_max: float = 1.2

    # Fixed seed makes generated reports reproducible
    seed: Optional[int] = _parse_optional_int(os.getenv('FATIGUE_SEED', ''))


@dataclass(frozen=True)
class LoadoutConfig:
    """Hardpoint settings."""
    # Positions offered for assignment but excluded from fired/aboard tracking
    untracked_positions: Tuple[str, ...] = _parse_list(os.getenv('UNTRACKED_POSITIONS', 'REA 11'))

    # Residual life below this percentage is flagged in fleet summaries
    low_life_threshold_percent: float = float(os.getenv('LOW_LIFE_THRESHOLD_PERCENT', '20'))


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    database: DatabaseConfig
    fatigue: FatigueConfig
    loadout: LoadoutConfig

    # Flask settings
    secret_key: str
    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        database=DatabaseConfig(),
        fatigue=FatigueConfig(),
        loadout=LoadoutConfig(),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
