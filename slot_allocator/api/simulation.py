"""
Simulation API Endpoints

Driver commands and status.

Endpoints:
- GET /simulation - Run state plus pending / newly-committed marks
- POST /simulation/start - Start (or resume) the timed simulation
- POST /simulation/pause - Freeze the tick timer
- POST /simulation/resume - Resume a paused simulation
- POST /simulation/stop - Stop and clear all commitments
- POST /simulation/step - Schedule a single iteration now

Illegal transitions (e.g. pausing an idle simulation) return 409.
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from slot_allocator.api.deps import get_trace_id, session_dependency, standard_response
from slot_allocator.core.errors import AppError, to_http_exception
from slot_allocator.engine.session import AllocationSession
from slot_allocator.schemas.simulation import SimulationView

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulation")


def _simulation_view(session: AllocationSession) -> dict:
    snapshot = session.snapshot()
    view = SimulationView(
        status=snapshot["simulation"],
        pending=snapshot["pending"],
        newly_committed=snapshot["newly_committed"],
    )
    return view.model_dump()


@router.get("")
async def get_simulation(request: Request, session: AllocationSession = Depends(session_dependency)):
    return standard_response(
        message=f"Simulation is {session.driver.state.value}",
        session=session,
        data=_simulation_view(session),
        trace_id=get_trace_id(request),
    )


@router.post("/start")
async def start_simulation(request: Request, session: AllocationSession = Depends(session_dependency)):
    state = await session.driver.start()
    return standard_response(
        message=f"Simulation {state.value}",
        session=session,
        data=_simulation_view(session),
        trace_id=get_trace_id(request),
    )


@router.post("/pause")
async def pause_simulation(request: Request, session: AllocationSession = Depends(session_dependency)):
    try:
        state = session.driver.pause()
    except AppError as e:
        raise to_http_exception(e, run_id=session.driver.run_id)

    return standard_response(
        message=f"Simulation {state.value}",
        session=session,
        data=_simulation_view(session),
        trace_id=get_trace_id(request),
    )


@router.post("/resume")
async def resume_simulation(request: Request, session: AllocationSession = Depends(session_dependency)):
    try:
        state = session.driver.resume()
    except AppError as e:
        raise to_http_exception(e, run_id=session.driver.run_id)

    return standard_response(
        message=f"Simulation {state.value}",
        session=session,
        data=_simulation_view(session),
        trace_id=get_trace_id(request),
    )


@router.post("/stop")
async def stop_simulation(request: Request, session: AllocationSession = Depends(session_dependency)):
    state = await session.driver.stop()
    return standard_response(
        message=f"Simulation stopped, state {state.value}",
        session=session,
        data=_simulation_view(session),
        trace_id=get_trace_id(request),
    )


@router.post("/step", status_code=status.HTTP_202_ACCEPTED)
async def step_simulation(request: Request, session: AllocationSession = Depends(session_dependency)):
    """
    Schedule one iteration in the background.

    The iteration runs with the configured visibility and settle delays;
    poll GET /simulation or listen on the event feed for its commits.
    A step requested while another iteration is in flight is skipped.
    """
    trace_id = get_trace_id(request)
    accepted = not session.driver.status()["in_flight"]
    session.driver.trigger_iteration()
    logger.info(f"[{trace_id[:8]}] Manual step requested (accepted={accepted})")

    return standard_response(
        message="Iteration scheduled" if accepted else "Iteration already in flight, step skipped",
        session=session,
        data={"accepted": accepted},
        trace_id=trace_id,
    )
