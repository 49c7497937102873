import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.use_cases.notifications import NotificationDispatcher
from app.config import get_settings
from app.infrastructure.database import engine, initialize_database
from app.interfaces.api.dependencies import build_notification_dispatcher
from app.interfaces.api.routes import register_routes


def create_app(dispatcher: NotificationDispatcher | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Prepare the database and dispatcher, then drain pending emails on exit."""

        logging.getLogger("app").setLevel(settings.log_level.upper())
        initialize_database()
        app.state.notification_dispatcher = dispatcher or build_notification_dispatcher(
            settings
        )
        yield
        await app.state.notification_dispatcher.drain(
            settings.notification_drain_timeout_seconds
        )
        engine.dispose()

    app = FastAPI(title="Congregation Portal", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
