"""
Global Constants

Default roster and slot grid used when the environment does not override
them, plus names shared by the API and the event feed.
"""

from typing import Any, Dict, List

# ============================================================================
# Default Provider Roster
# ============================================================================

DEFAULT_PROVIDERS: List[Dict[str, Any]] = [
    {"id": 1, "name": "NP Smith", "capacity": 3},
    {"id": 2, "name": "NP Johnson", "capacity": 2},
    {"id": 3, "name": "NP Williams", "capacity": 5},
    {"id": 4, "name": "NP Brown", "capacity": 1},
    {"id": 5, "name": "NP Davis", "capacity": 4},
    {"id": 6, "name": "NP Anderson", "capacity": 10},
    {"id": 7, "name": "NP Taylor", "capacity": 15},
]


# ============================================================================
# Slot Grid
# ============================================================================

DEFAULT_SLOT_START_HOUR = 10
DEFAULT_SLOT_END_HOUR = 13  # exclusive, last slot is 12:50
DEFAULT_SLOT_INTERVAL_MINUTES = 10

# Separator between the hour and minute components of a slot id ("10-30")
SLOT_ID_SEPARATOR = "-"


# ============================================================================
# Run States
# ============================================================================

RUN_STATE_IDLE = "idle"
RUN_STATE_RUNNING = "running"
RUN_STATE_PAUSED = "paused"


# ============================================================================
# Session Event Types
# ============================================================================

EVENT_TOGGLED = "toggled"
EVENT_WEIGHTS_CHANGED = "weights_changed"
EVENT_RESET = "reset"
EVENT_PENDING = "pending"
EVENT_COMMITTED = "committed"
EVENT_ITERATION_SKIPPED = "iteration_skipped"
EVENT_ITERATION_EMPTY = "iteration_empty"
EVENT_STATE_CHANGED = "state_changed"

ALL_EVENT_TYPES = (
    EVENT_TOGGLED,
    EVENT_WEIGHTS_CHANGED,
    EVENT_RESET,
    EVENT_PENDING,
    EVENT_COMMITTED,
    EVENT_ITERATION_SKIPPED,
    EVENT_ITERATION_EMPTY,
    EVENT_STATE_CHANGED,
)


# ============================================================================
# HTTP Headers
# ============================================================================

TRACE_HEADER_NAME = "x-request-id"
