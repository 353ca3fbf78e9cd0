"""
Book creation service.
"""

import uuid
from typing import Optional

import structlog

from api.models import Book, BookCreate
from api.store import BookStore

logger = structlog.get_logger(__name__)


class BookService:
    """Builds book records and hands them to the store."""

    def __init__(self, store: BookStore):
        self.store = store

    @staticmethod
    def generate_book_id() -> str:
        """Generate a new book identifier."""
        return str(uuid.uuid4())

    def create(self, payload: BookCreate, user: Optional[str] = None) -> Book:
        """
        Create a book with a freshly generated id.

        Args:
            payload: Validated creation payload
            user: Subject of the owner, None for an unowned book

        Returns:
            The created book including its id
        """
        book = Book(id=self.generate_book_id(), name=payload.name, user=user)
        self.store.insert(book)
        logger.info("Book created", book_id=book.id, user=user)
        return book
