"""
Simulation Schemas

Pydantic models for the driver status, iteration outcomes and the full
session snapshot pushed to observers.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from slot_allocator.schemas.allocation import (
    PairItem,
    ProviderItem,
    ResolverItem,
    ScoreItem,
    SlotItem,
    WeightsItem,
)


class SimulationStatus(BaseModel):
    """Matches SimulationDriver.status() output."""
    state: str = Field(..., description="idle, running or paused")
    run_id: Optional[str] = Field(None, description="Current or last run ID")
    iteration_count: int = Field(..., ge=0)
    in_flight: bool = Field(..., description="An iteration is between selection and final commit")
    period_ms: int
    visibility_delay_ms: int
    settle_delay_ms: int


class SimulationView(BaseModel):
    """Driver status together with the advisory marks."""
    status: SimulationStatus
    pending: List[PairItem] = Field(default_factory=list)
    newly_committed: List[PairItem] = Field(default_factory=list)


class SessionSnapshot(BaseModel):
    """
    Full session state.

    Matches AllocationSession.snapshot() output.
    """
    providers: List[ProviderItem]
    priority_order: List[int] = Field(..., description="Provider ids by license count ascending")
    slots: List[SlotItem]
    weights: WeightsItem
    scores: List[ScoreItem]
    resolver: List[ResolverItem]
    commitments: List[PairItem]
    pending: List[PairItem]
    newly_committed: List[PairItem]
    simulation: SimulationStatus

    model_config = ConfigDict(extra="forbid")


class SessionEventMessage(BaseModel):
    """Message pushed on the event feed."""
    type: str = Field(..., description="Session event type")
    payload: dict = Field(default_factory=dict)
    snapshot: SessionSnapshot
