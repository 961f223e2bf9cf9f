"""
Pydantic Schemas Package

Typed request/response models for the slot allocator API.

Schema Conventions:
- REST responses: {message: str, data: dict, proofs: Proofs}
- Snapshot: AllocationSession.snapshot() shape
- Event feed: {type, payload, snapshot}
"""

from slot_allocator.schemas.base import Proofs, ApiResponse

from slot_allocator.schemas.allocation import (
    ProviderItem,
    SlotItem,
    ScoreItem,
    ResolverItem,
    PairItem,
    AssignableRow,
    WeightsItem,
    WeightsUpdateRequest,
    ToggleRequest,
    ToggleResult,
)

from slot_allocator.schemas.simulation import (
    SimulationStatus,
    SimulationView,
    SessionSnapshot,
    SessionEventMessage,
)

__all__ = [
    # Base
    "Proofs",
    "ApiResponse",
    # Allocation
    "ProviderItem",
    "SlotItem",
    "ScoreItem",
    "ResolverItem",
    "PairItem",
    "AssignableRow",
    "WeightsItem",
    "WeightsUpdateRequest",
    "ToggleRequest",
    "ToggleResult",
    # Simulation
    "SimulationStatus",
    "SimulationView",
    "SessionSnapshot",
    "SessionEventMessage",
]
