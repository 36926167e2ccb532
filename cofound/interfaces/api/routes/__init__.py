from fastapi import FastAPI

from .chat import router as chat_router
from .messages import router as messages_router
from .users import router as users_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(chat_router)
    app.include_router(messages_router)
    app.include_router(users_router)
