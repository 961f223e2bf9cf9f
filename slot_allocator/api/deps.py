"""
API Utilities

Shared request helpers for the allocator routers: trace id extraction,
the standard {message, data, proofs} envelope and the session dependency.
"""

import uuid
from typing import Any, Dict, Optional

from fastapi import Request

from slot_allocator.constants.constants import TRACE_HEADER_NAME
from slot_allocator.engine.session import AllocationSession, get_session
from slot_allocator.schemas.allocation import ScoreItem
from slot_allocator.schemas.base import ApiResponse, Proofs
from slot_allocator.schemas.simulation import SessionSnapshot


def get_trace_id(request: Request) -> str:
    """Extract or generate trace ID from request."""
    return request.headers.get(TRACE_HEADER_NAME, str(uuid.uuid4()))


def session_dependency() -> AllocationSession:
    """FastAPI dependency returning the process-wide session."""
    return get_session()


def standard_response(
    message: str,
    session: AllocationSession,
    data: Optional[Dict[str, Any]] = None,
    trace_id: Optional[str] = None
) -> Dict[str, Any]:
    """Build standard response format (JSON-safe, infinite scores become null)."""
    response = ApiResponse(
        message=message,
        data=data or {},
        proofs=Proofs(
            trace_id=trace_id,
            run_id=session.driver.run_id,
            run_state=session.driver.state.value,
        ),
    )
    return response.model_dump(mode="json")


def snapshot_payload(session: AllocationSession) -> Dict[str, Any]:
    """Validated, JSON-safe session snapshot."""
    raw = session.snapshot()
    raw["scores"] = [ScoreItem.from_score(item) for item in raw["scores"]]
    return SessionSnapshot(**raw).model_dump(mode="json")
