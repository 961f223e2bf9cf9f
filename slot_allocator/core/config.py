"""
Core Configuration Module

Centralizes environment configuration for the slot allocator service.
Provides a singleton Settings object whose defaults match the built-in
slot grid, provider roster and simulation timing.

Usage:
    from slot_allocator.core.config import settings

    print(settings.APP_ENV)
    print(settings.SIM_ITERATION_PERIOD_MS)
"""

import json
import os
from typing import Any, Dict, List, Optional

from slot_allocator.constants.constants import (
    DEFAULT_SLOT_END_HOUR,
    DEFAULT_SLOT_INTERVAL_MINUTES,
    DEFAULT_SLOT_START_HOUR,
)
from slot_allocator.constants.thresholds import (
    DEFAULT_W1,
    ITERATION_PERIOD_MS,
    SETTLE_DELAY_MS,
    VISIBILITY_DELAY_MS,
)


class Settings:
    """
    Application settings loaded from environment variables.

    Every value is read lazily so tests can monkeypatch the environment
    and get fresh values without rebuilding the singleton.
    """

    # ==================== Application Settings ====================

    @property
    def APP_ENV(self) -> str:
        """Application environment: dev, staging, production"""
        return os.getenv("APP_ENV", "dev")

    @property
    def LOG_LEVEL(self) -> str:
        """Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"""
        return os.getenv("LOG_LEVEL", "INFO")

    # ==================== Slot Grid ====================

    @property
    def SLOT_START_HOUR(self) -> int:
        """First hour of the slot window (inclusive)"""
        return int(os.getenv("SLOT_START_HOUR", str(DEFAULT_SLOT_START_HOUR)))

    @property
    def SLOT_END_HOUR(self) -> int:
        """Last hour of the slot window (exclusive)"""
        return int(os.getenv("SLOT_END_HOUR", str(DEFAULT_SLOT_END_HOUR)))

    @property
    def SLOT_INTERVAL_MINUTES(self) -> int:
        """Minutes between consecutive slots"""
        return int(os.getenv("SLOT_INTERVAL_MINUTES", str(DEFAULT_SLOT_INTERVAL_MINUTES)))

    # ==================== Providers ====================

    @property
    def PROVIDERS_JSON(self) -> Optional[List[Dict[str, Any]]]:
        """
        Optional provider roster override.

        JSON list of {"id": int, "name": str, "capacity": int}.
        Returns None when unset so the default roster is used.
        """
        raw = os.getenv("PROVIDERS_JSON")
        if not raw:
            return None
        return json.loads(raw)

    # ==================== Scoring ====================

    @property
    def DEFAULT_W1(self) -> float:
        """Initial weight of the remaining-capacity term (w2 = 1 - w1)"""
        return float(os.getenv("DEFAULT_W1", str(DEFAULT_W1)))

    # ==================== Simulation Timing ====================

    @property
    def SIM_ITERATION_PERIOD_MS(self) -> int:
        """Delay between simulation ticks"""
        return int(os.getenv("SIM_ITERATION_PERIOD_MS", str(ITERATION_PERIOD_MS)))

    @property
    def SIM_VISIBILITY_DELAY_MS(self) -> int:
        """How long pending marks stay visible before the first commit"""
        return int(os.getenv("SIM_VISIBILITY_DELAY_MS", str(VISIBILITY_DELAY_MS)))

    @property
    def SIM_SETTLE_DELAY_MS(self) -> int:
        """Pause between two staggered commits of one iteration"""
        return int(os.getenv("SIM_SETTLE_DELAY_MS", str(SETTLE_DELAY_MS)))

    @property
    def SIM_SEED(self) -> Optional[int]:
        """Seed for band sampling (unset = unseeded)"""
        raw = os.getenv("SIM_SEED")
        return int(raw) if raw not in (None, "") else None

    # ==================== CORS Settings ====================

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Allowed CORS origins"""
        origins_str = os.getenv("CORS_ORIGINS", "*")
        if origins_str == "*":
            return ["*"]
        return [origin.strip() for origin in origins_str.split(",")]

    @property
    def CORS_ALLOW_CREDENTIALS(self) -> bool:
        """Allow credentials in CORS requests"""
        return os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"


# ==================== Singleton Instance ====================

_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the singleton Settings instance.

    Returns:
        Settings object with configuration values

    Example:
        >>> from slot_allocator.core.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.APP_ENV)
        'dev'
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


# Convenience singleton for direct import
settings = get_settings()


# ==================== Helper Functions ====================

def is_production() -> bool:
    """
    Check if the application is running in production environment.

    Returns:
        True if APP_ENV is 'production' or 'prod'
    """
    env = settings.APP_ENV.lower()
    return env in ("production", "prod")

