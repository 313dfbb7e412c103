"""LLM client module."""

from aiflow.llm.client import CompletionTransport, OpenAICompatibleTransport
from aiflow.llm.models import ChatMessage, CompletionOutcome, CompletionRequest, Role
from aiflow.llm.prompts import build_prompt, format_chat_history
from aiflow.llm.resilient import ResilientCompletionClient

__all__ = [
    "ChatMessage",
    "CompletionOutcome",
    "CompletionRequest",
    "CompletionTransport",
    "OpenAICompatibleTransport",
    "ResilientCompletionClient",
    "Role",
    "build_prompt",
    "format_chat_history",
]
