"""Observability module for metrics and monitoring."""

from aiflow.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    set_book_chunks_loaded,
    track_completion_request,
    track_completion_retry,
)

__all__ = [
    "MetricsMiddleware",
    "get_metrics",
    "set_book_chunks_loaded",
    "track_completion_request",
    "track_completion_retry",
]
