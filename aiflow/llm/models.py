"""LLM data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Message role in a conversation."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A message in a conversation.

    Attributes:
        role: The role of the message sender.
        content: The message content.
    """

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Message role")
    content: str = Field(description="Message content")


class CompletionRequest(BaseModel):
    """Outgoing chat completion request.

    Attributes:
        model: Model identifier.
        messages: Ordered conversation, oldest first.
        stream: Always false; streaming is not supported.
    """

    model: str = Field(description="Model identifier")
    messages: list[ChatMessage] = Field(description="Ordered conversation")
    stream: bool = Field(default=False, description="Stream the response")

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON body for the chat completions endpoint."""
        return {
            "model": self.model,
            "messages": [
                {"role": msg.role.value, "content": msg.content}
                for msg in self.messages
            ],
            "stream": self.stream,
        }


class CompletionOutcome(BaseModel):
    """Successful completion plus the retry state that produced it.

    Attributes:
        text: Trimmed completion text.
        model: Model identifier used.
        retry_count: Retries performed before success.
        elapsed_backoff: Total seconds spent sleeping between retries.
    """

    text: str = Field(description="Completion text")
    model: str = Field(description="Model used")
    retry_count: int = Field(default=0, description="Retries performed")
    elapsed_backoff: float = Field(default=0.0, description="Backoff seconds")
