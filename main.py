from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cofound.config import get_settings
from cofound.infrastructure.database import engine, initialize_database
from cofound.interfaces.api.routes import register_routes
from cofound.logging_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables on startup and release pooled connections on shutdown."""

    initialize_database()
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the chat API application."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Cofound chat", lifespan=lifespan)

    # Mobile and web clients connect from their own origins.
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
