"""API routes for chat operations."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request
from pydantic import BaseModel, Field

from aiflow.exceptions import ConfigurationError
from aiflow.llm.models import ChatMessage
from aiflow.logging_config import get_logger
from aiflow.workflow.handler import RequestHandler

logger = get_logger(__name__)


router = APIRouter(tags=["Chat"])


class ChatRequest(BaseModel):
    """Request body for /chat.

    ``text`` is optional at the schema level so that a missing value yields
    the relay's own 400 body rather than a schema error.
    """

    text: str | None = Field(default=None, description="Input text or question")
    language: str | None = Field(default="en", description="Language code or name")
    history: list[ChatMessage] = Field(
        default_factory=list,
        description="Prior turns, oldest first",
    )
    stepType: str | None = Field(default=None, description="Workflow operation")


def get_request_handler(request: Request) -> RequestHandler:
    """Resolve the handler built during application startup."""
    handler = getattr(request.app.state, "handler", None)
    if handler is None:
        raise ConfigurationError("Request handler is not initialized")
    return handler


@router.post("/chat")
async def chat_endpoint(
    handler: Annotated[RequestHandler, Depends(get_request_handler)],
    body: Annotated[ChatRequest | None, Body()] = None,
) -> dict[str, Any]:
    """Run a workflow step or answer a book question."""
    body = body or ChatRequest()

    result = await handler.handle(
        text=body.text,
        language=body.language,
        history=body.history,
        step_type=body.stepType,
    )
    return result.model_dump()
