"""
API Package - FastAPI Routers

- allocation: scores, resolver, commitments, weights
- simulation: driver commands and status
- events: session snapshot and WebSocket event feed
- router: aggregated api_router mounted by main.py
"""

API_VERSION = "1.0.0"

__all__ = ["API_VERSION"]
