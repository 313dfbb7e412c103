"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from aiflow.api.app import app
from aiflow.api.routes import get_request_handler
from aiflow.books.models import BookChunk
from aiflow.books.store import BookStore
from aiflow.config import LLMSettings
from aiflow.llm.resilient import ResilientCompletionClient
from aiflow.workflow.handler import RequestHandler
from tests.helpers import FakeTransport, RecordingSleep


@pytest.fixture
def llm_settings() -> LLMSettings:
    return LLMSettings(model="test-model", api_key=SecretStr("test-key"))


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport("ok")


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def completion_client(
    fake_transport: FakeTransport,
    llm_settings: LLMSettings,
    recording_sleep: RecordingSleep,
) -> ResilientCompletionClient:
    return ResilientCompletionClient(
        fake_transport,
        settings=llm_settings,
        sleep=recording_sleep,
    )


@pytest.fixture
def book_store() -> BookStore:
    return BookStore(
        [
            BookChunk(language="english", text="Chapter one: the river."),
            BookChunk(language="tamil", text="அத்தியாயம் ஒன்று."),
            BookChunk(language="english", text="Chapter two: the bridge."),
        ]
    )


@pytest.fixture
def request_handler(
    completion_client: ResilientCompletionClient,
    book_store: BookStore,
) -> RequestHandler:
    return RequestHandler(completion_client, books=book_store)


@pytest.fixture
async def client(request_handler: RequestHandler) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for FastAPI app.

    The request handler is replaced with one backed by a fake transport.

    Yields:
        AsyncClient configured for testing.
    """
    app.dependency_overrides[get_request_handler] = lambda: request_handler
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
