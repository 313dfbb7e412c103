"""Book content module."""

from aiflow.books.models import BookChunk
from aiflow.books.store import BookStore

__all__ = ["BookChunk", "BookStore"]
