"""
FastAPI Application Entry Point

Main application with lifecycle management for the allocation session:
the session is built from settings on startup and its simulation driver
is stopped on shutdown so no ticker task outlives the event loop.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from slot_allocator.api import API_VERSION
from slot_allocator.core.config import is_production, settings
from slot_allocator.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Builds the session, wires the event feed, and stops the driver on exit.
    """
    setup_logging()
    logger.info("Slot Allocator starting up...")

    from slot_allocator.api.events import manager
    from slot_allocator.engine.session import get_session

    session = get_session()
    manager.attach(session)

    yield

    logger.info("Slot Allocator shutting down...")

    try:
        await session.driver.stop()
        logger.info("Simulation driver stopped")
    finally:
        manager.detach()

    logger.info("Slot Allocator shutdown complete")


app = FastAPI(
    title="Slot Allocator",
    description="Availability-score slot allocation with a staged commit simulation",
    version=API_VERSION,
    docs_url=None if is_production() else "/docs",
    redoc_url=None if is_production() else "/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

from slot_allocator.api.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Service banner."""
    return {
        "service": "Slot Allocator",
        "status": "running",
        "version": API_VERSION
    }


@app.get("/health")
async def health():
    """Detailed health check."""
    from slot_allocator.engine.session import get_session

    session = get_session()
    return {
        "status": "healthy",
        "service": "slot_allocator",
        "components": {
            "api": "ok",
            "session": "ok",
            "simulation": session.driver.state.value
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
