"""
Core Logging Module

Provides centralized logging configuration with run_id injection.
Uses contextvars so every log line emitted inside a simulation run
(including its iteration tasks) carries the id of that run.

Usage:
    # At application startup:
    from slot_allocator.core.logging import setup_logging
    setup_logging()

    # Inside the simulation driver:
    from slot_allocator.core.logging import set_run_id
    import logging

    set_run_id("3f9a1c2e")
    logger = logging.getLogger(__name__)
    logger.info("Iteration committed 3 pairs")  # Will include run_id in logs
"""

import logging
import sys
from contextvars import ContextVar
from typing import Optional


# ==================== Context Variables ====================

RUN_ID: ContextVar[str] = ContextVar("run_id", default="-")


def set_run_id(run_id: str) -> None:
    """
    Set the simulation run_id for the current async context.

    Tasks created afterwards copy the context, so the ticker and its
    iterations inherit the id.

    Args:
        run_id: Short identifier of the simulation run
    """
    RUN_ID.set(run_id)


def get_run_id() -> str:
    """
    Get the run_id for the current async context.

    Returns:
        Current run_id or "-" outside a simulation run
    """
    return RUN_ID.get()


# ==================== Log Filters ====================

class RunIdFilter(logging.Filter):
    """Logging filter that copies the current run_id onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = get_run_id()
        return True


# ==================== Logging Setup ====================

_logging_setup_done = False


def setup_logging(log_level: Optional[str] = None, force: bool = False) -> None:
    """
    Configure application-wide logging with run_id support.

    Sets up:
    - Root logger level from settings or parameter
    - Console handler with structured formatting
    - RunIdFilter for automatic run_id injection

    This function is idempotent - calling it multiple times is safe
    unless force=True is specified.

    Args:
        log_level: Optional log level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        force: If True, reconfigure even if already set up
    """
    global _logging_setup_done

    if _logging_setup_done and not force:
        return

    if log_level is None:
        from slot_allocator.core.config import settings
        log_level = settings.LOG_LEVEL

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    if force:
        root_logger.handlers.clear()

    # Only add handler if none exist
    if not root_logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)

        formatter = logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] [run=%(run_id)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        console_handler.setFormatter(formatter)
        console_handler.addFilter(RunIdFilter())

        root_logger.addHandler(console_handler)

    _logging_setup_done = True

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {log_level.upper()}")


# ==================== Convenience Functions ====================

def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name, setting up logging first.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    if not _logging_setup_done:
        setup_logging()

    return logging.getLogger(name)
