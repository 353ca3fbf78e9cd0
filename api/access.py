"""
Ownership-scoped access to stored books.

A subject only ever sees its own books. Looking up a book that exists
but belongs to somebody else fails exactly like looking up an id that was
never issued, so callers cannot probe for other users' records.
"""

from typing import List

import structlog

from api.models import Book
from api.store import BookStore

logger = structlog.get_logger(__name__)


class BookNotFoundError(Exception):
    """Raised when a book is absent or not owned by the caller."""

    def __init__(self, book_id: str):
        self.book_id = book_id
        super().__init__(f"Book with ID '{book_id}' not found")


class OwnedBookAccess:
    """Reads and deletes books on behalf of an authenticated subject."""

    def __init__(self, store: BookStore):
        self.store = store

    def list_owned(self, subject: str) -> List[Book]:
        """
        List the books owned by a subject.

        Args:
            subject: Authenticated subject

        Returns:
            Books whose owner is the subject, possibly empty
        """
        return [book for book in self.store.list() if book.is_owned_by(subject)]

    def get_owned(self, subject: str, book_id: str) -> Book:
        """
        Get a book owned by a subject.

        Args:
            subject: Authenticated subject
            book_id: Book identifier

        Returns:
            The book

        Raises:
            BookNotFoundError: If the book does not exist or is not owned by the subject
        """
        book = self.store.get(book_id)
        if book is None or not book.is_owned_by(subject):
            logger.info("Owned book lookup missed", book_id=book_id, user=subject)
            raise BookNotFoundError(book_id)
        return book

    def delete_owned(self, subject: str, book_id: str) -> None:
        """
        Delete a book owned by a subject.

        The store is left untouched when the ownership check fails.

        Raises:
            BookNotFoundError: If the book does not exist or is not owned by the subject
        """
        self.get_owned(subject, book_id)
        if not self.store.delete(book_id):
            # Removed by a concurrent request between the check and the delete
            raise BookNotFoundError(book_id)
        logger.info("Book deleted", book_id=book_id, user=subject)
