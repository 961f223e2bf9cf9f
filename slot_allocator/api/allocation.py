"""
Allocation API Endpoints

Read access to scores, resolver output and commitments, plus the manual
controls (toggle, reset, weights).

Endpoints:
- GET /providers - Provider roster
- GET /slots - Fixed slot sequence
- GET /scores - Raw and truncated score per provider
- GET /resolver - Claimable provider per slot
- GET /resolver/{slot_id} - Claimable provider for one slot
- GET /assignable - Cells where a manual toggle is offered
- GET /commitments - Committed pairs
- POST /commitments/toggle - Flip one pair
- DELETE /commitments - Clear all commitments
- GET /weights - Current weights
- PUT /weights - Change one weight (clears commitments)
"""

import logging

from fastapi import APIRouter, Depends, Request

from slot_allocator.api.deps import get_trace_id, session_dependency, standard_response
from slot_allocator.core.errors import AppError, to_http_exception
from slot_allocator.engine.session import AllocationSession
from slot_allocator.schemas.allocation import (
    AssignableRow,
    PairItem,
    ProviderItem,
    ResolverItem,
    ScoreItem,
    SlotItem,
    ToggleRequest,
    ToggleResult,
    WeightsItem,
    WeightsUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Grid
# ============================================================================

@router.get("/providers")
async def list_providers(request: Request, session: AllocationSession = Depends(session_dependency)):
    providers = [ProviderItem(id=p.id, name=p.name, capacity=p.capacity) for p in session.providers]
    return standard_response(
        message=f"{len(providers)} providers",
        session=session,
        data={
            "providers": [p.model_dump() for p in providers],
            "priority_order": session.priority_order(),
        },
        trace_id=get_trace_id(request),
    )


@router.get("/slots")
async def list_slots(request: Request, session: AllocationSession = Depends(session_dependency)):
    slots = [SlotItem(id=s.id, index=s.index, label=s.label) for s in session.slots]
    return standard_response(
        message=f"{len(slots)} slots",
        session=session,
        data={"slots": [s.model_dump() for s in slots]},
        trace_id=get_trace_id(request),
    )


@router.get("/scores")
async def get_scores(request: Request, session: AllocationSession = Depends(session_dependency)):
    """
    Availability score per provider.

    `truncated` is the value the resolver compares; infinite scores are
    reported as null.
    """
    scores = [ScoreItem.from_score(item) for item in session.scores()]
    return standard_response(
        message=f"Scores for {len(scores)} providers",
        session=session,
        data={"weights": session.weights.as_dict(), "scores": [s.model_dump() for s in scores]},
        trace_id=get_trace_id(request),
    )


# ============================================================================
# Resolver
# ============================================================================

@router.get("/resolver")
async def get_resolver(request: Request, session: AllocationSession = Depends(session_dependency)):
    owners = {entry.slot_id: entry.provider_id for entry in session.resolve_all()}
    items = [ResolverItem(slot_id=s.id, provider_id=owners.get(s.id)) for s in session.slots]

    return standard_response(
        message=f"{len(owners)} of {len(items)} slots still claimable",
        session=session,
        data={"resolver": [i.model_dump() for i in items], "eligible_count": len(owners)},
        trace_id=get_trace_id(request),
    )


@router.get("/resolver/{slot_id}")
async def get_slot_owner(slot_id: str, request: Request, session: AllocationSession = Depends(session_dependency)):
    try:
        session.require_slot(slot_id)
    except AppError as e:
        raise to_http_exception(e, run_id=session.driver.run_id)

    owner = session.resolve(slot_id)
    message = f"Slot {slot_id} is claimable by provider {owner}" if owner is not None \
        else f"Slot {slot_id} has no eligible provider"

    return standard_response(
        message=message,
        session=session,
        data=ResolverItem(slot_id=slot_id, provider_id=owner).model_dump(),
        trace_id=get_trace_id(request),
    )


@router.get("/assignable")
async def get_assignable(request: Request, session: AllocationSession = Depends(session_dependency)):
    """Per provider, the slots whose checkbox would be enabled."""
    rows = [
        AssignableRow(
            provider_id=p.id,
            assignable=[s.id for s in session.slots if session.is_assignable(p.id, s.id)],
        )
        for p in session.providers
    ]
    return standard_response(
        message="Assignable cells",
        session=session,
        data={"rows": [r.model_dump() for r in rows]},
        trace_id=get_trace_id(request),
    )


# ============================================================================
# Commitments
# ============================================================================

@router.get("/commitments")
async def list_commitments(request: Request, session: AllocationSession = Depends(session_dependency)):
    snapshot = session.snapshot()
    commitments = [PairItem(**pair) for pair in snapshot["commitments"]]
    return standard_response(
        message=f"{len(commitments)} commitments",
        session=session,
        data={"commitments": [c.model_dump() for c in commitments]},
        trace_id=get_trace_id(request),
    )


@router.post("/commitments/toggle")
async def toggle_commitment(
    body: ToggleRequest,
    request: Request,
    session: AllocationSession = Depends(session_dependency)
):
    """Manual toggle of one (provider, slot) pair."""
    trace_id = get_trace_id(request)
    try:
        session.require_provider(body.provider_id)
        session.require_slot(body.slot_id)
    except AppError as e:
        logger.info(f"[{trace_id[:8]}] Rejected toggle: {e.message}")
        raise to_http_exception(e, run_id=session.driver.run_id)

    committed = session.toggle(body.provider_id, body.slot_id)
    result = ToggleResult(provider_id=body.provider_id, slot_id=body.slot_id, committed=committed)

    return standard_response(
        message=f"Provider {body.provider_id} {'holds' if committed else 'released'} slot {body.slot_id}",
        session=session,
        data=result.model_dump(),
        trace_id=trace_id,
    )


@router.delete("/commitments")
async def clear_commitments(request: Request, session: AllocationSession = Depends(session_dependency)):
    session.reset()
    return standard_response(
        message="All commitments cleared",
        session=session,
        data={"commitments": []},
        trace_id=get_trace_id(request),
    )


# ============================================================================
# Weights
# ============================================================================

@router.get("/weights")
async def get_weights(request: Request, session: AllocationSession = Depends(session_dependency)):
    return standard_response(
        message="Current weights",
        session=session,
        data=WeightsItem(**session.weights.as_dict()).model_dump(),
        trace_id=get_trace_id(request),
    )


@router.put("/weights")
async def update_weights(
    body: WeightsUpdateRequest,
    request: Request,
    session: AllocationSession = Depends(session_dependency)
):
    """
    Change one weight. The other is recomputed as 1 - value, both are
    clamped to [0.1, 0.9], and every commitment is cleared.
    """
    try:
        weights = session.set_weights(w1=body.w1, w2=body.w2)
    except AppError as e:
        raise to_http_exception(e, run_id=session.driver.run_id)

    return standard_response(
        message="Weights updated, commitments cleared",
        session=session,
        data=WeightsItem(**weights.as_dict()).model_dump(),
        trace_id=get_trace_id(request),
    )
