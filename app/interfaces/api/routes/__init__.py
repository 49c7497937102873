from fastapi import FastAPI

from .announcements import router as announcements_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(announcements_router)
