"""Resilient chat completion client.

Wraps a single-shot transport with failure classification and a bounded,
sequential retry loop for rate-limited calls.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from aiflow.config import LLMSettings, get_settings
from aiflow.exceptions import CompletionError
from aiflow.llm.client import CompletionTransport
from aiflow.llm.errors import (
    EmptyCompletionError,
    ErrorKind,
    build_completion_error,
    classify,
    describe_error,
)
from aiflow.llm.models import ChatMessage, CompletionOutcome, CompletionRequest, Role
from aiflow.logging_config import get_logger
from aiflow.observability.metrics import track_completion_request, track_completion_retry

logger = get_logger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]


def extract_text(content: Any) -> str:
    """Reduce first-choice content to trimmed text.

    Plain strings are trimmed. Lists of typed segments keep only the ``text``
    segments, joined in order.

    Raises:
        EmptyCompletionError: If there is no text to return.
    """
    if content is None:
        raise EmptyCompletionError()

    if isinstance(content, str):
        text = content
    elif isinstance(content, list):
        text = "".join(
            str(part.get("text") or "")
            for part in content
            if isinstance(part, dict) and part.get("type") == "text"
        )
    else:
        text = str(content)

    text = text.strip()
    if not text:
        raise EmptyCompletionError()
    return text


def backoff_delay(retry_count: int, base: float = 2.0, cap: float = 30.0) -> float:
    """Delay before retry number ``retry_count + 1``: 2s, 4s, 8s, ... capped."""
    return min(base * (2**retry_count), cap)


def build_messages(prompt: str, history: Sequence[ChatMessage]) -> list[ChatMessage]:
    """Caller history in order, followed by the new user turn."""
    return [*history, ChatMessage(role=Role.USER, content=prompt)]


class ResilientCompletionClient:
    """Completion client that retries rate-limited failures.

    Only rate-limited failures are retried; every other failure is raised
    on first occurrence as a CompletionError.
    """

    def __init__(
        self,
        transport: CompletionTransport,
        settings: LLMSettings | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            transport: Single-shot completion transport.
            settings: LLM configuration (retry bound, backoff).
            sleep: Awaitable sleep, replaceable in tests.
        """
        self._transport = transport
        self._settings = settings or get_settings().llm
        self._sleep = sleep

    @property
    def model_name(self) -> str:
        """Model served by the underlying transport."""
        return self._transport.model_name

    async def complete(
        self,
        prompt: str,
        language: str,
        history: Sequence[ChatMessage] = (),
    ) -> str:
        """Complete a prompt and return the trimmed text.

        Raises:
            CompletionError: If the call fails or retries are exhausted.
        """
        outcome = await self.complete_with_state(prompt, language, history)
        return outcome.text

    async def complete_with_state(
        self,
        prompt: str,
        language: str,
        history: Sequence[ChatMessage] = (),
    ) -> CompletionOutcome:
        """Complete a prompt and report the retry state alongside the text.

        Args:
            prompt: New user turn.
            language: Canonical language code, used for diagnostics.
            history: Prior turns, oldest first. Never mutated.

        Returns:
            CompletionOutcome with the text and retry bookkeeping.

        Raises:
            CompletionError: If the call fails or retries are exhausted.
        """
        request = CompletionRequest(
            model=self.model_name,
            messages=build_messages(prompt, history),
        )
        max_retries = self._settings.max_retries
        retry_count = 0
        elapsed_backoff = 0.0

        while True:
            logger.info(
                "Requesting completion",
                extra={
                    "model": request.model,
                    "language": language,
                    "messages": len(request.messages),
                    "attempt": retry_count + 1,
                },
            )
            started = time.perf_counter()
            try:
                content = await self._transport.send(request)
                text = extract_text(content)
            except Exception as exc:
                track_completion_request(
                    request.model, time.perf_counter() - started, success=False
                )
                description = describe_error(exc)
                kind = classify(description)
                logger.warning(
                    f"Completion attempt failed: {description.message}",
                    extra={
                        "status_code": description.status_code,
                        "kind": kind.value,
                        "retry_count": retry_count,
                    },
                )

                if kind is ErrorKind.RATE_LIMITED and retry_count < max_retries:
                    delay = backoff_delay(
                        retry_count,
                        self._settings.backoff_base,
                        self._settings.backoff_max,
                    )
                    logger.info(
                        f"Rate limited, retrying in {delay:.1f}s",
                        extra={"retry": retry_count + 1, "max_retries": max_retries},
                    )
                    track_completion_retry(request.model)
                    await self._sleep(delay)
                    elapsed_backoff += delay
                    retry_count += 1
                    continue

                error: CompletionError = build_completion_error(
                    description, kind, retry_count
                )
                logger.error(
                    f"Completion failed: {error.message}",
                    extra={"status_code": error.status_code, "retry_count": retry_count},
                )
                raise error from exc

            track_completion_request(request.model, time.perf_counter() - started)
            logger.info(
                "Completion succeeded",
                extra={"retry_count": retry_count, "length": len(text)},
            )
            return CompletionOutcome(
                text=text,
                model=request.model,
                retry_count=retry_count,
                elapsed_backoff=elapsed_backoff,
            )
