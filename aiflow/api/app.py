"""FastAPI application entry point.

Configures the application with logging, CORS, metrics, exception handling,
the chat route and health checks.
"""

import traceback
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aiflow import __version__
from aiflow.api.routes import router as chat_router
from aiflow.books.store import BookStore
from aiflow.config import get_settings
from aiflow.exceptions import AIFlowError, BookContentError, ValidationError
from aiflow.llm.client import OpenAICompatibleTransport
from aiflow.llm.resilient import ResilientCompletionClient
from aiflow.logging_config import get_logger, setup_logging
from aiflow.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
    set_book_chunks_loaded,
)
from aiflow.workflow.handler import RequestHandler

logger = get_logger(__name__)

HEALTH_MESSAGE = "AI Flow Runner Backend is running"


def _load_books(path: str) -> BookStore:
    try:
        books = BookStore.load_from_file(path)
    except BookContentError as e:
        logger.error(f"{e.message}; continuing without book content", extra=e.details)
        books = BookStore()
    set_book_chunks_loaded(len(books))
    return books


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Loads book content and builds the completion client before serving.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level)
    logger.info(
        "Starting AIFlow relay",
        extra={
            "version": __version__,
            "environment": settings.environment.value,
            "model": settings.llm.model,
        },
    )

    if not settings.llm.api_key.get_secret_value():
        logger.warning("LLM_API_KEY is not set; upstream calls will be rejected")

    books = _load_books(settings.book.chunks_path) if settings.book.enabled else BookStore()
    transport = OpenAICompatibleTransport(settings=settings.llm)
    client = ResilientCompletionClient(transport, settings=settings.llm)

    app.state.books = books
    app.state.handler = RequestHandler(
        client,
        books=books,
        book_chat_enabled=settings.book.enabled,
    )

    yield

    logger.info("Shutting down AIFlow relay")
    await transport.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="AIFlow Relay",
        description="LLM-backed text workflows and book chat",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(MetricsMiddleware)

    app.add_exception_handler(AIFlowError, aiflow_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(chat_router)
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], tags=["Metrics"])

    return app


def _debug_fields(exc: BaseException) -> dict[str, Any]:
    """Nested cause and a truncated traceback, for non-production only."""
    fields: dict[str, Any] = {}
    if exc.__cause__ is not None:
        fields["originalError"] = str(exc.__cause__)
    lines = "".join(traceback.format_exception(exc)).strip().splitlines()
    if lines:
        fields["stack"] = "\n".join(lines[-3:])
    return fields


async def aiflow_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle AIFlowError exceptions.

    Converts exceptions to structured JSON responses.
    """
    if not isinstance(exc, AIFlowError):
        return await unhandled_exception_handler(request, exc)

    if isinstance(exc, ValidationError):
        logger.warning(f"Rejected request: {exc.message}", extra={"path": request.url.path})
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    logger.error(
        f"Request failed: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "status_code": exc.status_code,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    content = exc.to_dict()
    if not get_settings().is_production:
        content.update(_debug_fields(exc))

    return JSONResponse(status_code=exc.status_code, content=content)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Last-resort handler for unexpected exceptions."""
    logger.exception(
        f"Unhandled error: {exc}",
        exc_info=exc,
        extra={"path": request.url.path},
    )

    content: dict[str, Any] = {
        "error": str(exc) or "Internal server error",
        "statusCode": 500,
    }
    if not get_settings().is_production:
        content.update(_debug_fields(exc))

    return JSONResponse(status_code=500, content=content)


async def health_check() -> dict[str, str]:
    """Basic health check endpoint."""
    return {"status": "ok", "message": HEALTH_MESSAGE}


async def readiness_check(request: Request) -> dict[str, Any]:
    """Readiness probe.

    Reports whether the handler is built, book content is loaded and an API
    key is configured.
    """
    settings = get_settings()
    books = getattr(request.app.state, "books", None)
    handler = getattr(request.app.state, "handler", None)

    checks: dict[str, str] = {
        "handler": "ok" if handler is not None else "not_initialized",
        "api_key": "ok" if settings.llm.api_key.get_secret_value() else "missing",
        "book_content": "ok" if books else "empty",
    }
    ready = checks["handler"] == "ok" and checks["api_key"] == "ok"

    return {
        "status": "ready" if ready else "not_ready",
        "checks": checks,
        "version": __version__,
    }


async def liveness_check() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "alive"}


async def metrics_endpoint() -> Response:
    """Prometheus metrics exposition."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


# Create the application instance
app = create_app()
