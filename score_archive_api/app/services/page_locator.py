"""
Validation and geometry of score locations.

A location is the triple (book, begin, end).  ``PageLocator`` checks
that the book exists and that the range is not reversed, and answers
whether a page lies inside a location or two locations share a page.

Overlapping locations are flagged, not rejected: the two sides of a
sheet (see ``backOf``) legitimately occupy the same pages.  The score
service logs a warning when a write produces an overlap.
"""

from typing import Iterable, List

from ..core.errors import InvalidLocation, InvalidRange
from ..repositories.book_repository import BookRepository
from ..schemas.page import Page, PageNumber
from ..schemas.score import ScoreRead


class PageLocator:
    """Checks and compares page locations."""

    @staticmethod
    def check_range(page: Page) -> None:
        """Raise ``InvalidRange`` if ``page.end`` lies before ``page.begin``."""
        if page.end is not None and page.end < page.begin:
            raise InvalidRange(
                f"Location ends at page {page.end} before it begins at page {page.begin}",
                field="location.end",
            )

    @classmethod
    def validate(cls, books: BookRepository, page: Page) -> None:
        """Validate a location against the store.

        Raises
        ------
        InvalidLocation
            If ``page.book`` does not name an existing book.
        InvalidRange
            If the range is reversed.
        """
        if not books.exists(page.book):
            raise InvalidLocation(f"Book {page.book} does not exist", field="location.book")
        cls.check_range(page)

    @staticmethod
    def contains(page: Page, number: PageNumber) -> bool:
        """Whether ``number`` falls within ``[begin, end]`` of ``page``."""
        return page.begin <= number <= page.last

    @staticmethod
    def overlaps(a: Page, b: Page) -> bool:
        """Whether two locations share at least one page of the same book."""
        if a.book != b.book:
            return False
        return PageLocator.contains(a, b.begin) or PageLocator.contains(b, a.begin)

    @classmethod
    def find_overlaps(cls, page: Page, score_id: int, others: Iterable[ScoreRead]) -> List[int]:
        """Ids of the scores in ``others`` whose location overlaps ``page``."""
        return [
            other.id
            for other in others
            if other.id != score_id
            and other.location is not None
            and cls.overlaps(page, other.location)
        ]
