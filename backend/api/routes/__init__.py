"""API route modules."""

from fastapi import FastAPI

from . import explain, settings


def register_routes(app: FastAPI):
    """Register all API routers."""
    app.include_router(explain.router, prefix="/api/explain", tags=["explain"])
    app.include_router(settings.router, prefix="/api/settings", tags=["settings"])
