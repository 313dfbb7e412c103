"""Book content data models."""

from pydantic import BaseModel, ConfigDict, Field


class BookChunk(BaseModel):
    """A passage of book text in one language.

    Attributes:
        language: Lower-case English language name, e.g. ``tamil``.
        text: Passage text.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    language: str = Field(default="", description="Language key")
    text: str = Field(default="", description="Passage text")
