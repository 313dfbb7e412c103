"""Upstream failure description and classification.

Vendor SDKs and HTTP clients fail with differently shaped errors. The adapter
in this module reduces any of them to an ``ErrorDescription``; classification
and the user-facing error are pure functions of that record.
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from aiflow.exceptions import CompletionError, ErrorCode

DEFAULT_STATUS_CODE = 500
MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 599

RATE_LIMIT_KEYWORDS = ("rate", "limit", "quota")
AUTH_KEYWORDS = ("auth", "cookie", "api key", "unauthorized")
PROVIDER_KEYWORDS = (
    "provider",
    "unavailable",
    "no endpoints",
    "model not found",
    "overloaded",
)

AUTH_MESSAGE = (
    "Authentication with the AI provider failed. "
    "Check that the API key is configured correctly."
)
PROVIDER_MESSAGE = (
    "The AI provider or model is currently unavailable. "
    "Please try again later."
)


class ProviderResponseError(Exception):
    """Provider answered with an error object instead of a completion."""

    def __init__(self, error: Any) -> None:
        self.error = error
        if isinstance(error, dict):
            message = str(error.get("message") or "Provider returned an error")
        else:
            message = str(error)
        super().__init__(message)


class EmptyCompletionError(Exception):
    """Provider returned no usable text."""

    def __init__(self) -> None:
        super().__init__("No response from AI agent")


class ErrorKind(str, Enum):
    """Failure classes of an upstream call."""

    RATE_LIMITED = "rate_limited"
    AUTH = "auth"
    PROVIDER = "provider"
    UNKNOWN = "unknown"


class ErrorDescription(BaseModel):
    """Normalized view of an upstream failure.

    Attributes:
        message: Best human-readable message found on the error.
        status_code: Best numeric status found, 500 when none.
        body: Stringified vendor error body, empty when absent.
    """

    message: str = Field(description="Extracted error message")
    status_code: int = Field(default=DEFAULT_STATUS_CODE, description="Status")
    body: str = Field(default="", description="Raw error body")


def _read(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _as_status(value: Any) -> int | None:
    """Read an HTTP status; vendor codes outside 100..599 are not statuses."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.isdigit():
        value = int(value)
    if isinstance(value, int) and MIN_STATUS_CODE <= value <= MAX_STATUS_CODE:
        return value
    return None


def _response_json(response: Any) -> Any:
    parse = getattr(response, "json", None)
    if not callable(parse):
        return None
    try:
        return parse()
    except ValueError:
        return None


def _nested_error(exc: BaseException) -> Any:
    error = _read(exc, "error")
    if error is not None:
        return error
    body = _response_json(_read(exc, "response"))
    if isinstance(body, dict):
        return body.get("error")
    return None


def _extract_message(exc: BaseException, error: Any) -> str:
    direct = _read(exc, "message")
    if isinstance(direct, str) and direct:
        return direct

    nested = error if isinstance(error, str) else _read(error, "message")
    if isinstance(nested, str) and nested:
        return nested

    return str(exc) or type(exc).__name__


def _extract_status(exc: BaseException, error: Any) -> int:
    for name in ("status", "status_code", "statusCode", "code"):
        status = _as_status(_read(exc, name))
        if status is not None:
            return status

    response = _read(exc, "response")
    for name in ("status_code", "status"):
        status = _as_status(_read(response, name))
        if status is not None:
            return status

    status = _as_status(_read(error, "code"))
    if status is not None:
        return status

    return DEFAULT_STATUS_CODE


def _extract_body(exc: BaseException, error: Any) -> str:
    text = _read(_read(exc, "response"), "text")
    if isinstance(text, str) and text:
        return text
    if error is None:
        return ""
    if isinstance(error, str):
        return error
    return json.dumps(error, default=str)


def describe_error(exc: BaseException) -> ErrorDescription:
    """Reduce any upstream failure to an ErrorDescription.

    Args:
        exc: Exception raised by the transport.

    Returns:
        Normalized description of the failure.
    """
    error = _nested_error(exc)
    return ErrorDescription(
        message=_extract_message(exc, error),
        status_code=_extract_status(exc, error),
        body=_extract_body(exc, error),
    )


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def is_rate_limited(description: ErrorDescription) -> bool:
    """Whether a failure is throttling and therefore worth retrying."""
    if description.status_code == 429:
        return True
    return _contains_any(description.message, RATE_LIMIT_KEYWORDS) or _contains_any(
        description.body, RATE_LIMIT_KEYWORDS
    )


def classify(description: ErrorDescription) -> ErrorKind:
    """Classify a described failure.

    Rate limiting wins over every other class.
    """
    if is_rate_limited(description):
        return ErrorKind.RATE_LIMITED
    if description.status_code == 401 or _contains_any(
        description.message, AUTH_KEYWORDS
    ):
        return ErrorKind.AUTH
    if _contains_any(description.message, PROVIDER_KEYWORDS):
        return ErrorKind.PROVIDER
    return ErrorKind.UNKNOWN


def build_completion_error(
    description: ErrorDescription,
    kind: ErrorKind,
    retry_count: int,
) -> CompletionError:
    """Build the user-facing error for a failure that will not be retried.

    Args:
        description: Described upstream failure.
        kind: Classification of the failure.
        retry_count: Retries already performed.

    Returns:
        CompletionError ready to raise.
    """
    details = {
        "upstream_message": description.message,
        "upstream_status": description.status_code,
        "kind": kind.value,
    }

    if kind is ErrorKind.RATE_LIMITED:
        return CompletionError(
            f"Rate limit exceeded. Retried {retry_count} times without success. "
            "Please wait 30-60 seconds and try again.",
            status_code=429,
            code=ErrorCode.LLM_RATE_LIMIT,
            is_rate_limit=True,
            retry_count=retry_count,
            details=details,
        )

    if kind is ErrorKind.AUTH:
        return CompletionError(
            AUTH_MESSAGE,
            status_code=401,
            code=ErrorCode.LLM_AUTH_ERROR,
            retry_count=retry_count,
            details=details,
        )

    if kind is ErrorKind.PROVIDER:
        return CompletionError(
            PROVIDER_MESSAGE,
            status_code=description.status_code,
            code=ErrorCode.LLM_PROVIDER_ERROR,
            retry_count=retry_count,
            details=details,
        )

    return CompletionError(
        description.message,
        status_code=description.status_code,
        code=ErrorCode.LLM_SERVICE_ERROR,
        retry_count=retry_count,
        details=details,
    )
