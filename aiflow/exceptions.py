"""Application exception hierarchy.

All custom exceptions inherit from AIFlowError.
Each exception carries an error code and the HTTP status it maps to.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "AIF-1000"
    CONFIGURATION_ERROR = "AIF-1001"
    VALIDATION_ERROR = "AIF-1002"

    # Book content errors (2xxx)
    BOOK_CONTENT_ERROR = "AIF-2000"

    # Completion errors (5xxx)
    LLM_SERVICE_ERROR = "AIF-5000"
    LLM_RATE_LIMIT = "AIF-5002"
    LLM_AUTH_ERROR = "AIF-5003"
    LLM_PROVIDER_ERROR = "AIF-5004"


class AIFlowError(Exception):
    """Base exception for all relay errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        status_code: HTTP status returned to the caller.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.message,
            "statusCode": self.status_code,
            "code": self.code.value,
        }


class ConfigurationError(AIFlowError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, 500, details)


class ValidationError(AIFlowError):
    """Missing or invalid request input. Never retried."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, 400, details)

    def to_dict(self) -> dict[str, Any]:
        """Client errors use the short ``{error, success}`` body."""
        return {"error": self.message, "success": False}


class BookContentError(AIFlowError):
    """Book content could not be loaded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.BOOK_CONTENT_ERROR, 500, details)


class CompletionError(AIFlowError):
    """Chat completion failed after classification and any retries.

    Attributes:
        is_rate_limit: Whether the failure was classified as throttling.
        retry_count: Retries performed before giving up.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: ErrorCode = ErrorCode.LLM_SERVICE_ERROR,
        is_rate_limit: bool = False,
        retry_count: int = 0,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, status_code, details)
        self.is_rate_limit = is_rate_limit
        self.retry_count = retry_count
