"""
Allocation Schemas

Pydantic models for providers, slots, scores, resolver output and
commitments, plus the manual toggle and weight update requests.

Matches AllocationSession.snapshot() output.
"""

import math
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict


# ============================================================================
# Grid
# ============================================================================

class ProviderItem(BaseModel):
    id: int = Field(..., description="Provider identifier")
    name: str = Field(..., description="Display name")
    capacity: int = Field(..., description="Number of licenses")


class SlotItem(BaseModel):
    id: str = Field(..., description="Slot identifier (hour-minute)")
    index: int = Field(..., description="Position in the fixed time order", ge=0)
    label: str = Field(..., description="Time of day (HH:MM)")


class ScoreItem(BaseModel):
    """
    Availability score of one provider.

    A provider with no licenses scores infinitely; JSON cannot carry that,
    so score and truncated are null and `infinite` is set.
    """
    provider_id: int
    score: Optional[float] = Field(None, description="Raw score w1*x + w2*decay")
    truncated: Optional[float] = Field(None, description="Score truncated to 2 decimals (used for comparison)")
    infinite: bool = Field(False, description="Provider has no licenses")
    committed: int = Field(..., description="Slots committed to this provider", ge=0)

    @classmethod
    def from_score(cls, item: Dict[str, Any]) -> "ScoreItem":
        """Build from an AllocationSession.scores() entry."""
        infinite = not math.isfinite(item["score"])
        return cls(
            provider_id=item["provider_id"],
            score=None if infinite else item["score"],
            truncated=None if infinite else item["truncated"],
            infinite=infinite,
            committed=item["committed"],
        )


class ResolverItem(BaseModel):
    slot_id: str
    provider_id: Optional[int] = Field(None, description="Claimable provider, null when exhausted")


class PairItem(BaseModel):
    provider_id: int
    slot_id: str

    model_config = ConfigDict(frozen=True)


class AssignableRow(BaseModel):
    provider_id: int
    assignable: List[str] = Field(..., description="Slot ids where a manual toggle is offered")


# ============================================================================
# Weights
# ============================================================================

class WeightsItem(BaseModel):
    w1: float = Field(..., description="Weight of the remaining-slots share", ge=0.1, le=0.9)
    w2: float = Field(..., description="Weight of the scarcity bonus", ge=0.1, le=0.9)


class WeightsUpdateRequest(BaseModel):
    """Set one weight; the other becomes 1 - value. Out-of-range values are clamped."""
    w1: Optional[float] = Field(None, description="New w1")
    w2: Optional[float] = Field(None, description="New w2")


# ============================================================================
# Manual Control
# ============================================================================

class ToggleRequest(BaseModel):
    provider_id: int = Field(..., description="Provider identifier")
    slot_id: str = Field(..., description="Slot identifier (hour-minute)")


class ToggleResult(BaseModel):
    provider_id: int
    slot_id: str
    committed: bool = Field(..., description="Membership after the toggle")
