"""
Engine Package

Stateful side of the allocator:
- models: Slot, Provider, Weights and grid/roster builders
- commitment_store: Authoritative set of committed (provider, slot) pairs
- simulation: Staged, timed simulation driver (idle/running/paused)
- session: AllocationSession facade and process-wide singleton

Everything runs on one asyncio event loop; there is a single writer.
"""

from slot_allocator.engine.models import (
    Slot,
    Provider,
    Weights,
    generate_time_slots,
    build_providers,
)
from slot_allocator.engine.commitment_store import CommitmentStore
from slot_allocator.engine.simulation import RunState, IterationResult, SimulationDriver
from slot_allocator.engine.session import (
    SessionEvent,
    AllocationSession,
    get_session,
    reset_session,
)

__all__ = [
    "Slot",
    "Provider",
    "Weights",
    "generate_time_slots",
    "build_providers",
    "CommitmentStore",
    "RunState",
    "IterationResult",
    "SimulationDriver",
    "SessionEvent",
    "AllocationSession",
    "get_session",
    "reset_session",
]
