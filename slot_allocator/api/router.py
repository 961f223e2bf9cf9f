"""
Central API Router

Aggregates the allocator routers under one APIRouter.
Handles missing routers gracefully so a broken module does not take the
whole service down.
"""

import logging
from fastapi import APIRouter

logger = logging.getLogger(__name__)

# Main API router
api_router = APIRouter()

# Router configurations: (module_name, prefix, tags)
ROUTER_CONFIGS = [
    ("allocation", "", ["Allocation"]),
    ("simulation", "", ["Simulation"]),
    ("events", "", ["Session"]),
]


def _include_router_safe(module_name: str, prefix: str, tags: list) -> None:
    """
    Safely import and include a router module.
    Logs warnings/errors but does not raise exceptions.
    """
    try:
        module = __import__(f"slot_allocator.api.{module_name}", fromlist=["router"])
        router = getattr(module, "router")

        api_router.include_router(router, prefix=prefix, tags=tags)
        logger.info(f"Registered {module_name} router")

    except ImportError as e:
        logger.warning(f"Router module 'slot_allocator.api.{module_name}' not importable - skipping: {e}")
    except AttributeError:
        logger.warning(f"Module 'slot_allocator.api.{module_name}' has no 'router' attribute - skipping")


for module_name, prefix, tags in ROUTER_CONFIGS:
    _include_router_safe(module_name, prefix, tags)

logger.info(f"API router initialized with {len(api_router.routes)} routes")
