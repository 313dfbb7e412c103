"""Workflow data models."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

EMOTIONS = ("stressed", "happy", "sad", "angry", "neutral")
DEFAULT_EMOTION = "Neutral"

CATEGORIES = (
    "Work & Career",
    "Family & Relationships",
    "Health & Wellness",
    "Finance & Money",
    "Personal & General",
)
DEFAULT_CATEGORY = "Personal & General"


class Operation(str, Enum):
    """Text-processing steps a caller can request via ``stepType``."""

    CLEAN_TEXT = "clean_text"
    DETECT_EMOTION = "detect_emotion"
    CATEGORIZE_TEXT = "categorize_text"
    SUMMARIZE = "summarize"
    TRANSLATE = "translate"
    BOOK_CHAT = "book_chat"

    @classmethod
    def parse(cls, value: str | None) -> "Operation | None":
        """Map a stepType to an operation.

        Absent values mean book chat; unknown values return None and are
        treated as raw passthrough prompts.
        """
        if not value:
            return cls.BOOK_CHAT
        try:
            return cls(value)
        except ValueError:
            return None


class WorkflowResult(BaseModel):
    """Result of a workflow step."""

    success: bool = True
    response: str = Field(description="Normalized model output")
    model: str = Field(description="Model used")
    stepType: str = Field(description="Requested step type")
    language: str = Field(description="Canonical language code")
    type: Literal["workflow"] = "workflow"


class BookChatResult(BaseModel):
    """Result of a book chat question."""

    success: bool = True
    question: str = Field(description="The user's question")
    language: str = Field(description="Canonical language code")
    answer: str = Field(description="Model answer")
    model: str = Field(description="Model used")
    type: Literal["book_chatbot"] = "book_chatbot"
