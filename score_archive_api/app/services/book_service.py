"""
Business logic for books.

Books are referenced by the locations of scores but do not own them.
When a book is deleted, the location of every score placed in it is
cleared; the scores themselves are kept.
"""

import logging
import sqlite3
from typing import List, Optional

from ..core.db import run_in_transaction
from ..core.errors import IdNotAllowed, NotFound
from ..repositories.book_repository import BookRepository
from ..repositories.score_repository import ScoreRepository
from ..schemas.book import BookCreate, BookRead, BookUpdate
from ..schemas.score import ScoreRead


class BookService:
    """Service class for managing books."""

    @classmethod
    async def create_book(cls, data: BookCreate) -> BookRead:
        """Insert a new book and return it with its assigned id."""
        logger = logging.getLogger(__name__)
        if data.id is not None:
            raise IdNotAllowed("Book ids are assigned by the server", field="id")

        def work(cursor: sqlite3.Cursor) -> BookRead:
            books = BookRepository(cursor)
            return books.get(books.insert(data))

        book = await run_in_transaction(work)
        logger.info("Created book %s '%s'", book.id, book.name)
        return book

    @classmethod
    async def get_book(cls, book_id: int) -> BookRead:
        def work(cursor: sqlite3.Cursor) -> Optional[BookRead]:
            return BookRepository(cursor).get(book_id)

        book = await run_in_transaction(work, write=False)
        if book is None:
            raise NotFound(f"Book {book_id} not found", field="id")
        return book

    @classmethod
    async def update_book(cls, data: BookUpdate) -> BookRead:
        """Replace name and annotation of the book named by ``data.id``."""
        logger = logging.getLogger(__name__)

        def work(cursor: sqlite3.Cursor) -> BookRead:
            books = BookRepository(cursor)
            if not books.update(data.id, data):
                raise NotFound(f"Book {data.id} not found", field="id")
            return books.get(data.id)

        book = await run_in_transaction(work)
        logger.info("Updated book %s", book.id)
        return book

    @classmethod
    async def delete_book(cls, book_id: int) -> None:
        """Delete a book and clear the locations pointing into it.

        Raises ``NotFound`` if the book does not exist.
        """
        logger = logging.getLogger(__name__)

        def work(cursor: sqlite3.Cursor) -> List[int]:
            books = BookRepository(cursor)
            if not books.exists(book_id):
                raise NotFound(f"Book {book_id} not found", field="id")
            cleared = ScoreRepository(cursor).clear_locations_in_book(book_id)
            books.delete(book_id)
            return cleared

        cleared = await run_in_transaction(work)
        logger.info("Deleted book %s, cleared location of scores %s", book_id, cleared)

    @classmethod
    async def get_book_pages(cls, book_id: int) -> List[ScoreRead]:
        """Return the scores located in a book in page order.

        Scores are sorted by the first page of their location (prefix,
        then number, then suffix), ties broken by score id.
        """

        def work(cursor: sqlite3.Cursor) -> Optional[List[ScoreRead]]:
            if not BookRepository(cursor).exists(book_id):
                return None
            return ScoreRepository(cursor).list_in_book(book_id)

        scores = await run_in_transaction(work, write=False)
        if scores is None:
            raise NotFound(f"Book {book_id} not found", field="id")
        return sorted(scores, key=lambda score: (score.location.begin.sort_key(), score.id))
