"""API routes package."""

from gateway.routes.stream_routes import router as stream_router

__all__ = ["stream_router"]
