"""
Book endpoints for API v1.

CRUD for the physical binders of the archive plus a listing of the
scores located in a book, in page order.
"""

from typing import List

from fastapi import APIRouter, status

from score_archive_api.app.schemas.book import BookCreate, BookRead, BookUpdate
from score_archive_api.app.schemas.score import ScoreRead
from score_archive_api.app.services.book_service import BookService

router = APIRouter()


@router.post("", response_model=BookRead, status_code=status.HTTP_201_CREATED)
async def post_book(book: BookCreate) -> BookRead:
    """Create a new book.  The id is assigned by the server."""
    return await BookService.create_book(book)


@router.put("", response_model=BookRead)
async def put_book(book: BookUpdate) -> BookRead:
    """Replace the book named by the ``id`` in the body."""
    return await BookService.update_book(book)


@router.get("/{book_id}", response_model=BookRead)
async def get_book(book_id: int) -> BookRead:
    return await BookService.get_book(book_id)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(book_id: int) -> None:
    """Delete a book.

    Scores located in the book are kept but lose their location.
    """
    await BookService.delete_book(book_id)
    return None


@router.get("/{book_id}/pages", response_model=List[ScoreRead])
async def get_book_pages(book_id: int) -> List[ScoreRead]:
    """List the scores located in a book, ordered by their first page."""
    return await BookService.get_book_pages(book_id)
