"""
Core Package

Centralized configuration, logging and error handling for the slot
allocator service.

Modules:
- config: Environment configuration and settings
- logging: Structured logging with run_id support
- errors: Standardized error classes and HTTP conversion

Usage:
    from slot_allocator.core import settings, setup_logging, set_run_id
    from slot_allocator.core import NotFoundError, SimulationStateError
"""

# Configuration
from slot_allocator.core.config import settings, get_settings, is_production

# Logging
from slot_allocator.core.logging import (
    setup_logging,
    set_run_id,
    get_run_id,
    get_logger
)

# Errors
from slot_allocator.core.errors import (
    AppError,
    ValidationError,
    NotFoundError,
    SimulationStateError,
    to_http_exception
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    "is_production",

    # Logging
    "setup_logging",
    "set_run_id",
    "get_run_id",
    "get_logger",

    # Errors
    "AppError",
    "ValidationError",
    "NotFoundError",
    "SimulationStateError",
    "to_http_exception",
]
