"""
Application factory.

Run with:
    uvicorn publication_assistant.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from publication_assistant.api import api_router
from publication_assistant.api.v1.error_handlers import register_exception_handlers
from publication_assistant.config import Settings, get_settings
from publication_assistant.core.logging import RequestIDMiddleware, setup_logging, stop_queue_logging
from publication_assistant.database import dispose_engine
from publication_assistant.utils.logging import get_project_version

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(f"Starting publication assistant ({settings.ENV})")
        yield
        logger.info("Shutting down publication assistant")
        await dispose_engine()
        stop_queue_logging()

    app = FastAPI(
        title="Publication Assistant",
        version=get_project_version(),
        lifespan=lifespan,
    )

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router)

    return app


app = create_app()
