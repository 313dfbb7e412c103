"""Tests for book content loading and lookup."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from aiflow.books.models import BookChunk
from aiflow.books.store import CHUNK_SEPARATOR, BookStore
from aiflow.exceptions import BookContentError


class TestBookStore:
    """Tests for BookStore."""

    def test_get_content_joins_chunks_for_language(self, book_store: BookStore) -> None:
        content = book_store.get_content("en")
        assert content == f"Chapter one: the river.{CHUNK_SEPARATOR}Chapter two: the bridge."

    def test_get_content_accepts_names(self, book_store: BookStore) -> None:
        assert book_store.get_content("Tamil") == "அத்தியாயம் ஒன்று."

    def test_missing_language_is_empty(self, book_store: BookStore) -> None:
        assert book_store.get_content("fr") == ""

    def test_empty_store(self) -> None:
        store = BookStore()
        assert len(store) == 0
        assert store.get_content("en") == ""

    def test_language_key_case_insensitive(self) -> None:
        store = BookStore([BookChunk(language="English", text="Hello")])
        assert store.get_content("en") == "Hello"

    def test_chunks_are_immutable(self, book_store: BookStore) -> None:
        assert isinstance(book_store.chunks, tuple)


class TestLoadFromFile:
    """Tests for BookStore.load_from_file."""

    def test_load(self) -> None:
        with TemporaryDirectory() as tmp:
            path = Path(tmp) / "chunks.json"
            path.write_text(
                json.dumps(
                    [
                        {"language": "english", "text": "One", "page": 1},
                        {"language": "hindi", "text": "Ek"},
                    ]
                ),
                encoding="utf-8",
            )

            store = BookStore.load_from_file(path)

        assert len(store) == 2
        assert store.get_content("hi") == "Ek"

    def test_missing_file_gives_empty_store(self) -> None:
        with TemporaryDirectory() as tmp:
            store = BookStore.load_from_file(Path(tmp) / "missing.json")
        assert len(store) == 0

    @pytest.mark.parametrize("raw", ["not json", '{"language": "english"}', "[1, 2]"])
    def test_invalid_file_raises(self, raw: str) -> None:
        with TemporaryDirectory() as tmp:
            path = Path(tmp) / "chunks.json"
            path.write_text(raw, encoding="utf-8")

            with pytest.raises(BookContentError):
                BookStore.load_from_file(path)
