"""API routes for the audio combine service."""

from .combine import router as combine_router
from .health import router as health_router

__all__ = ["combine_router", "health_router"]
