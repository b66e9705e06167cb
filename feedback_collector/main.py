"""Application factory and process-wide wiring."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from litestar import Litestar, Request
from litestar.config.cors import CORSConfig
from litestar.contrib.jinja import JinjaTemplateEngine
from litestar.di import Provide
from litestar.exceptions import HTTPException, NotFoundException, ValidationException
from litestar.response import Response
from litestar.status_codes import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from litestar.template.config import TemplateConfig

from feedback_collector.api.feedback import FeedbackNotFoundException
from feedback_collector.config import Settings, load_settings
from feedback_collector.routes import ROUTES
from feedback_collector.store import FeedbackStore
from feedback_collector.utils.logging import configure_logging, log_request_error

logger = logging.getLogger("FeedbackCollector")

TEMPLATE_DIR = Path(__file__).parent / "templates"


# --- Exception handlers

def handle_validation_error(request: Request, exc: ValidationException) -> Response:
    """400 with every field error, so the form can show them all at once."""
    errors = exc.extra if isinstance(exc.extra, list) else [{"field": "body", "msg": exc.detail}]
    return Response(
        content={"errors": errors},
        status_code=HTTP_400_BAD_REQUEST,
        media_type="application/json",
    )


def handle_not_found(request: Request, exc: NotFoundException) -> Response:
    if isinstance(exc, FeedbackNotFoundException):
        message = exc.detail
    elif request.url.path.startswith("/api"):
        message = "API endpoint not found"
    else:
        message = "Not found"
    return Response(
        content={"message": message},
        status_code=HTTP_404_NOT_FOUND,
        media_type="application/json",
    )


def handle_http_error(request: Request, exc: HTTPException) -> Response:
    # Store failures are logged where they are caught
    return Response(
        content={"message": exc.detail},
        status_code=exc.status_code,
        media_type="application/json",
    )


def make_unhandled_error_handler(expose_detail: bool):
    def log_exceptions(request: Request, exc: Exception) -> Response:
        log_request_error(request, exc, message="Unhandled exception occurred")
        content = {"message": "Something went wrong!"}
        if expose_detail:
            content["error"] = str(exc)
        return Response(
            content=content,
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            media_type="application/json",
        )

    return log_exceptions


# --- App init

def create_app(settings: Optional[Settings] = None, store: Optional[FeedbackStore] = None) -> Litestar:
    """Build the app; the store is opened on startup and closed on shutdown."""
    settings = settings or load_settings()
    store = store or FeedbackStore(settings.database_url)

    configure_logging(settings.debug)
    logger.info(f"Starting app in {'DEBUG' if settings.debug else 'PRODUCTION'} mode")

    @asynccontextmanager
    async def store_lifespan(app: Litestar) -> AsyncIterator[None]:
        await store.connect(create_tables=settings.auto_create_tables)
        try:
            yield
        finally:
            await store.close()

    def provide_store() -> FeedbackStore:
        return store

    def provide_settings() -> Settings:
        return settings

    return Litestar(
        route_handlers=ROUTES,
        debug=settings.debug,
        lifespan=[store_lifespan],
        dependencies={
            "store": Provide(provide_store, sync_to_thread=False),
            "settings": Provide(provide_settings, sync_to_thread=False),
        },
        cors_config=CORSConfig(allow_origins=settings.cors_origins),
        template_config=TemplateConfig(
            directory=TEMPLATE_DIR,
            engine=JinjaTemplateEngine,
        ),
        exception_handlers={
            ValidationException: handle_validation_error,
            NotFoundException: handle_not_found,
            HTTPException: handle_http_error,
            Exception: make_unhandled_error_handler(settings.debug),
        },
    )
