"""Test doubles shared across test modules."""

from typing import Any

import httpx

from aiflow.llm.client import CompletionTransport
from aiflow.llm.models import CompletionRequest


class FakeTransport(CompletionTransport):
    """Transport that replays scripted outcomes and records requests.

    Outcomes are consumed in order; the last one repeats forever. An
    exception outcome is raised instead of returned.
    """

    def __init__(self, *outcomes: Any, model: str = "test-model") -> None:
        self.outcomes = list(outcomes) or ["ok"]
        self.model = model
        self.requests: list[CompletionRequest] = []

    async def send(self, request: CompletionRequest) -> Any:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    @property
    def model_name(self) -> str:
        return self.model


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def http_error(status: int, message: str) -> httpx.HTTPStatusError:
    """Build an httpx status error with an OpenAI-style error body."""
    request = httpx.Request("POST", "https://llm.test/v1/chat/completions")
    response = httpx.Response(
        status,
        json={"error": {"message": message, "code": status}},
        request=request,
    )
    return httpx.HTTPStatusError(message, request=request, response=response)
