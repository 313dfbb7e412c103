"""Read-only store of book passages.

Loaded once at startup and shared by all requests without locking, since it
is never mutated after construction.
"""

import json
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from aiflow.books.models import BookChunk
from aiflow.exceptions import BookContentError
from aiflow.languages import book_key, normalize_language
from aiflow.logging_config import get_logger

logger = get_logger(__name__)

CHUNK_SEPARATOR = "\n\n---\n\n"


class BookStore:
    """In-memory book passages queried by language."""

    def __init__(self, chunks: Iterable[BookChunk] = ()) -> None:
        self._chunks = tuple(chunks)

    def __len__(self) -> int:
        return len(self._chunks)

    @property
    def chunks(self) -> tuple[BookChunk, ...]:
        return self._chunks

    @classmethod
    def load_from_file(cls, path: str | Path) -> "BookStore":
        """Load passages from a JSON array of ``{language, text}`` objects.

        A missing file yields an empty store; book chat then answers without
        content.

        Args:
            path: Path to the chunks JSON file.

        Returns:
            Populated BookStore.

        Raises:
            BookContentError: If the file exists but cannot be parsed.
        """
        path = Path(path)
        if not path.exists():
            logger.warning(
                f"No book content found at {path}; book chat will run without it"
            )
            return cls()

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, list):
                raise ValueError("expected a JSON array of chunks")
            chunks = [BookChunk.model_validate(item) for item in data]
        except (OSError, ValueError, PydanticValidationError) as e:
            raise BookContentError(
                f"Failed to load book content: {e}",
                details={"path": str(path)},
            ) from e

        logger.info(f"Loaded {len(chunks)} chunks for book chatbot")
        return cls(chunks)

    def get_content(self, language: str) -> str:
        """Join all passages for a language.

        Args:
            language: Language code or name; normalized before lookup.

        Returns:
            Passages joined by a separator, or an empty string.
        """
        if not self._chunks:
            return ""

        key = book_key(normalize_language(language))
        texts = [
            chunk.text
            for chunk in self._chunks
            if chunk.language and chunk.language.lower() == key
        ]
        return CHUNK_SEPARATOR.join(texts)
