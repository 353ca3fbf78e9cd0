"""
In-memory book storage.
"""

import threading
from typing import Dict, List, Optional

import structlog

from api.models import Book

logger = structlog.get_logger(__name__)


class BookStore:
    """Thread-safe keyed collection of book records.

    Every operation takes the lock for its own duration only; callers that
    combine operations (read then delete) get no transaction across them.
    """

    def __init__(self):
        self._books: Dict[str, Book] = {}
        self._lock = threading.Lock()

    def insert(self, book: Book) -> Book:
        """
        Store a book under its id.

        Args:
            book: Book record with its id already assigned

        Returns:
            The stored book
        """
        with self._lock:
            self._books[book.id] = book
        return book

    def get(self, book_id: str) -> Optional[Book]:
        """
        Get a book by id.

        Args:
            book_id: Book identifier

        Returns:
            The book if found, None otherwise
        """
        with self._lock:
            return self._books.get(book_id)

    def list(self) -> List[Book]:
        """Return all books in insertion order."""
        with self._lock:
            return list(self._books.values())

    def delete(self, book_id: str) -> bool:
        """
        Delete a book by id.

        Args:
            book_id: Book identifier

        Returns:
            True if deleted, False if not found
        """
        with self._lock:
            return self._books.pop(book_id, None) is not None

    def clear(self) -> None:
        """Remove every book. Used to isolate tests."""
        with self._lock:
            removed = len(self._books)
            self._books.clear()
        logger.debug("Book store cleared", removed=removed)

    def count(self) -> int:
        with self._lock:
            return len(self._books)

    def __len__(self) -> int:
        return self.count()
