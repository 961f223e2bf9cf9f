"""
Base Schemas

Envelope shared by every REST response: {message, data, proofs}.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict


class Proofs(BaseModel):
    """
    Tracing information included in every response.

    - trace_id: Request trace ID (x-request-id header or generated)
    - run_id: Simulation run the response was produced under, if any
    - run_state: Driver state at response time
    """
    trace_id: Optional[str] = Field(None, description="Request trace ID")
    run_id: Optional[str] = Field(None, description="Simulation run ID")
    run_state: Optional[str] = Field(None, description="Simulation state (idle/running/paused)")

    model_config = ConfigDict(extra="allow")


class ApiResponse(BaseModel):
    """Standard response structure."""
    message: str = Field(..., description="Human-readable summary")
    data: Dict[str, Any] = Field(default_factory=dict, description="Response payload")
    proofs: Proofs = Field(default_factory=Proofs, description="Tracing information")

    model_config = ConfigDict(extra="allow")
