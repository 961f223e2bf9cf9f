"""
Constants Package

Centralized constants for the slot allocator.

Exports:
- Score, weight and sampling-band thresholds
- Default provider roster and slot grid
- Run state and session event names

Safe to import anywhere - no heavy dependencies or circular imports.
"""

from .thresholds import (
    DECAY_RATE,
    SCORE_DECIMALS,
    MIN_WEIGHT,
    MAX_WEIGHT,
    DEFAULT_W1,
    WEIGHT_DECIMALS,
    STAGE1_BAND,
    STAGE2_BAND,
    STAGE3_BAND,
    ITERATION_PERIOD_MS,
    VISIBILITY_DELAY_MS,
    SETTLE_DELAY_MS,
)

from .constants import (
    DEFAULT_PROVIDERS,
    DEFAULT_SLOT_START_HOUR,
    DEFAULT_SLOT_END_HOUR,
    DEFAULT_SLOT_INTERVAL_MINUTES,
    SLOT_ID_SEPARATOR,
    RUN_STATE_IDLE,
    RUN_STATE_RUNNING,
    RUN_STATE_PAUSED,
    EVENT_TOGGLED,
    EVENT_WEIGHTS_CHANGED,
    EVENT_RESET,
    EVENT_PENDING,
    EVENT_COMMITTED,
    EVENT_ITERATION_SKIPPED,
    EVENT_ITERATION_EMPTY,
    EVENT_STATE_CHANGED,
    ALL_EVENT_TYPES,
    TRACE_HEADER_NAME,
)

__all__ = [
    # Thresholds
    "DECAY_RATE",
    "SCORE_DECIMALS",
    "MIN_WEIGHT",
    "MAX_WEIGHT",
    "DEFAULT_W1",
    "WEIGHT_DECIMALS",
    "STAGE1_BAND",
    "STAGE2_BAND",
    "STAGE3_BAND",
    "ITERATION_PERIOD_MS",
    "VISIBILITY_DELAY_MS",
    "SETTLE_DELAY_MS",
    # Defaults
    "DEFAULT_PROVIDERS",
    "DEFAULT_SLOT_START_HOUR",
    "DEFAULT_SLOT_END_HOUR",
    "DEFAULT_SLOT_INTERVAL_MINUTES",
    "SLOT_ID_SEPARATOR",
    # Run states
    "RUN_STATE_IDLE",
    "RUN_STATE_RUNNING",
    "RUN_STATE_PAUSED",
    # Events
    "EVENT_TOGGLED",
    "EVENT_WEIGHTS_CHANGED",
    "EVENT_RESET",
    "EVENT_PENDING",
    "EVENT_COMMITTED",
    "EVENT_ITERATION_SKIPPED",
    "EVENT_ITERATION_EMPTY",
    "EVENT_STATE_CHANGED",
    "ALL_EVENT_TYPES",
    "TRACE_HEADER_NAME",
]
