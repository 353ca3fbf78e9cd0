"""
Tests for book creation and ownership-scoped access.
"""

import uuid

import pytest

from api.access import BookNotFoundError
from api.models import BookCreate

USER1 = "user1@example.com"
USER2 = "user2@example.com"


def test_create_assigns_unique_ids(book_service, book_store):
    """Test every created book gets its own id."""
    books = [book_service.create(BookCreate(name=f"Book {i}"), user=USER1) for i in range(50)]
    assert len({book.id for book in books}) == 50
    assert len(book_store) == 50


def test_create_stores_book(book_service, book_store):
    """Test the created book is stored with name and owner."""
    book = book_service.create(BookCreate(name="My best book"), user=USER1)
    uuid.UUID(book.id)
    assert book.name == "My best book"
    assert book.user == USER1
    assert book_store.get(book.id) == book


def test_create_unowned(book_service):
    """Test a book can be created without an owner."""
    book = book_service.create(BookCreate(name="No-ones book"))
    assert book.user is None


def test_list_owned_filters_by_subject(book_service, owned_access):
    """Test only the subject's books are listed."""
    book_service.create(BookCreate(name="Your book1"), user=USER2)
    book_service.create(BookCreate(name="Your book2"), user=USER2)
    book_service.create(BookCreate(name="My book1"), user=USER1)
    book_service.create(BookCreate(name="My book2"), user=USER1)
    book_service.create(BookCreate(name="No-ones book"))
    book_service.create(BookCreate(name="Your book3"), user=USER2)

    mine = owned_access.list_owned(USER1)
    assert len(mine) == 2
    assert all(book.user == USER1 for book in mine)
    assert len(owned_access.list_owned(USER2)) == 3


def test_list_owned_empty(owned_access):
    """Test listing with no books is not an error."""
    assert owned_access.list_owned(USER1) == []


def test_unowned_books_never_listed(book_service, owned_access):
    """Test unowned books are hidden from every subject."""
    book_service.create(BookCreate(name="No-ones book"))
    for subject in (USER1, USER2, "", "None"):
        assert owned_access.list_owned(subject) == []


def test_get_owned(book_service, owned_access):
    """Test the owner can fetch its book."""
    book = book_service.create(BookCreate(name="Mine"), user=USER1)
    assert owned_access.get_owned(USER1, book.id) == book


def test_get_owned_other_subject(book_service, owned_access):
    """Test another subject's book is not found."""
    book = book_service.create(BookCreate(name="Mine"), user=USER1)
    with pytest.raises(BookNotFoundError) as exc_info:
        owned_access.get_owned(USER2, book.id)
    assert exc_info.value.book_id == book.id


def test_get_owned_missing(owned_access):
    """Test an id that was never issued is not found."""
    with pytest.raises(BookNotFoundError):
        owned_access.get_owned(USER1, str(uuid.uuid4()))


def test_get_owned_unowned_book(book_service, owned_access):
    """Test an unowned book cannot be fetched by anyone."""
    book = book_service.create(BookCreate(name="No-ones book"))
    with pytest.raises(BookNotFoundError):
        owned_access.get_owned(USER1, book.id)


def test_not_found_message_is_uniform(book_service, owned_access):
    """Test missing and foreign books raise the same message shape."""
    book = book_service.create(BookCreate(name="Mine"), user=USER1)
    missing_id = str(uuid.uuid4())

    with pytest.raises(BookNotFoundError) as foreign:
        owned_access.get_owned(USER2, book.id)
    with pytest.raises(BookNotFoundError) as missing:
        owned_access.get_owned(USER2, missing_id)

    assert str(foreign.value) == str(missing.value).replace(missing_id, book.id)


def test_delete_owned(book_service, book_store, owned_access):
    """Test the owner can delete its book."""
    book = book_service.create(BookCreate(name="Mine"), user=USER1)
    owned_access.delete_owned(USER1, book.id)
    assert book_store.get(book.id) is None

    with pytest.raises(BookNotFoundError):
        owned_access.delete_owned(USER1, book.id)


def test_delete_owned_other_subject_leaves_store(book_service, book_store, owned_access):
    """Test a non-owner cannot delete and the store is unchanged."""
    book = book_service.create(BookCreate(name="Mine"), user=USER1)
    before = book_store.list()

    with pytest.raises(BookNotFoundError):
        owned_access.delete_owned(USER2, book.id)

    assert book_store.list() == before
    assert owned_access.get_owned(USER1, book.id) == book


def test_delete_owned_missing(owned_access):
    """Test deleting an id that was never issued is not found."""
    with pytest.raises(BookNotFoundError):
        owned_access.delete_owned(USER1, str(uuid.uuid4()))
