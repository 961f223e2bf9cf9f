"""
Session Events API

Full snapshot for polling clients and a WebSocket feed that pushes a fresh
snapshot after every session event.

Endpoints:
- GET /session - Full session snapshot
- WS /session/events - {type, payload, snapshot} per session event
"""

import asyncio
import logging
from typing import List, Optional, Set

from fastapi import APIRouter, Depends, Request, WebSocket, WebSocketDisconnect

from slot_allocator.api.deps import get_trace_id, session_dependency, snapshot_payload, standard_response
from slot_allocator.engine.session import AllocationSession, SessionEvent, get_session
from slot_allocator.schemas.simulation import SessionEventMessage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session")


class ConnectionManager:
    """Tracks connected WebSocket observers and fans out session events."""

    def __init__(self):
        self.active_connections: List[WebSocket] = []
        self._session: Optional[AllocationSession] = None
        self._sends: Set[asyncio.Task] = set()

    def attach(self, session: AllocationSession) -> None:
        """Start forwarding events of `session` (replaces any previous one)."""
        self.detach()
        self._session = session
        session.subscribe(self.on_event)

    @property
    def session(self) -> Optional[AllocationSession]:
        return self._session

    def detach(self) -> None:
        if self._session is not None:
            self._session.unsubscribe(self.on_event)
            self._session = None

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def broadcast(self, message: str):
        for connection in list(self.active_connections):
            try:
                await connection.send_text(message)
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.info(f"Dropping event observer: {e}")
                self.disconnect(connection)

    def on_event(self, event: SessionEvent) -> None:
        """Session listener: snapshot now, send on the event loop."""
        if not self.active_connections or self._session is None:
            return

        message = SessionEventMessage(
            type=event.type,
            payload=event.payload,
            snapshot=snapshot_payload(self._session),
        ).model_dump_json()
        task = asyncio.get_running_loop().create_task(self.broadcast(message))
        self._sends.add(task)
        task.add_done_callback(self._sends.discard)


manager = ConnectionManager()


@router.get("")
async def get_snapshot(request: Request, session: AllocationSession = Depends(session_dependency)):
    return standard_response(
        message="Session snapshot",
        session=session,
        data=snapshot_payload(session),
        trace_id=get_trace_id(request),
    )


@router.websocket("/events")
async def session_events(websocket: WebSocket):
    session = get_session()
    if manager.session is not session:
        manager.attach(session)
    await manager.connect(websocket)

    await websocket.send_text(SessionEventMessage(
        type="snapshot",
        snapshot=snapshot_payload(session),
    ).model_dump_json())

    try:
        while True:
            # Clients only listen; incoming text keeps the socket alive
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(websocket)
