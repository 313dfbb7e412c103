"""Prometheus metrics for the relay.

Provides metrics instrumentation for:
- HTTP request latency and counts
- Completion latency, outcomes and retries
- Loaded book content
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from aiflow.logging_config import get_logger

logger = get_logger(__name__)

# HTTP Request Metrics
HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)

HTTP_REQUEST_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Completion Metrics
COMPLETION_REQUEST_DURATION = Histogram(
    "completion_request_duration_seconds",
    "Single upstream completion attempt duration in seconds",
    ["model", "status"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)

COMPLETION_REQUEST_TOTAL = Counter(
    "completion_requests_total",
    "Total upstream completion attempts",
    ["model", "status"],
)

COMPLETION_RETRIES_TOTAL = Counter(
    "completion_retries_total",
    "Retries performed after rate-limited completions",
    ["model"],
)

# Book Metrics
BOOK_CHUNKS_LOADED = Gauge(
    "book_chunks_loaded",
    "Number of book chunks loaded at startup",
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and collect metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        endpoint = self._normalize_endpoint(request.url.path)

        HTTP_REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).observe(duration)

        HTTP_REQUEST_TOTAL.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        return response

    def _normalize_endpoint(self, path: str) -> str:
        """Normalize endpoint path to reduce cardinality."""
        if path.startswith("/health"):
            return "/health"
        if path.startswith("/chat"):
            return "/chat"
        return "other"


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST


def track_completion_request(
    model: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track one upstream completion attempt.

    Args:
        model: Model identifier.
        duration: Attempt duration in seconds.
        success: Whether the attempt produced text.
    """
    status = "success" if success else "error"

    COMPLETION_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    COMPLETION_REQUEST_TOTAL.labels(model=model, status=status).inc()


def track_completion_retry(model: str) -> None:
    COMPLETION_RETRIES_TOTAL.labels(model=model).inc()


def set_book_chunks_loaded(count: int) -> None:
    BOOK_CHUNKS_LOADED.set(count)
