"""Chat completion transports.

A transport performs exactly one upstream call and hands back the raw first
choice content. It never retries and never classifies failures; vendor errors
propagate unchanged so the resilient client can inspect them.
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx

from aiflow.config import LLMSettings, get_settings
from aiflow.llm.errors import ProviderResponseError
from aiflow.llm.models import CompletionRequest
from aiflow.logging_config import get_logger

logger = get_logger(__name__)


class CompletionTransport(ABC):
    """Abstract base class for chat completion transports."""

    @abstractmethod
    async def send(self, request: CompletionRequest) -> Any:
        """Send a completion request.

        Args:
            request: Completion request to send.

        Returns:
            The first choice's message content: a string, a list of typed
            segments, or None when the provider returned nothing.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name."""
        ...


class OpenAICompatibleTransport(CompletionTransport):
    """Transport for OpenAI-compatible chat completion APIs.

    Works with:
    - OpenRouter (https://openrouter.ai/api/v1)
    - Groq (https://api.groq.com/openai/v1)
    - Any OpenAI-compatible endpoint
    """

    def __init__(
        self,
        settings: LLMSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            settings: LLM configuration.
            client: HTTP client (for testing).
        """
        self._settings = settings or get_settings().llm
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    def _headers(self) -> dict[str, str]:
        headers = {
            "HTTP-Referer": self._settings.site_url,
            "X-Title": self._settings.app_title,
        }
        api_key = self._settings.api_key.get_secret_value()
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    async def send(self, request: CompletionRequest) -> Any:
        """Post to ``/chat/completions`` and return the first choice content."""
        client = await self._get_client()
        url = f"{self._settings.base_url.rstrip('/')}/chat/completions"

        response = await client.post(
            url,
            json=request.to_payload(),
            headers=self._headers(),
        )
        response.raise_for_status()

        data = response.json()

        # OpenRouter reports some upstream failures with a 200 and an error body
        if isinstance(data, dict) and data.get("error"):
            raise ProviderResponseError(data["error"])

        choices = data.get("choices") or []
        if not choices:
            return None
        message = choices[0].get("message") or {}
        return message.get("content")
