"""
Pydantic models describing where a score is printed.

A ``Page`` places a score inside a book: it names the book and the
first page, and optionally the last page.  Page numbers may carry an
alphanumeric prefix and suffix (``A6``, ``12b``), which is how the
archive's binders are paginated.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PageNumber(BaseModel):
    """A page number with optional prefix and suffix.

    Page numbers are ordered by prefix first (no prefix sorts before
    any prefix), then by number, then by suffix (no suffix first).
    """

    prefix: Optional[str] = Field(None, examples=["A"])
    number: int = Field(..., ge=0, examples=[6])
    suffix: Optional[str] = Field(None, examples=[None])

    model_config = ConfigDict(frozen=True)

    @field_validator("prefix", "suffix")
    @classmethod
    def blank_is_absent(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    def sort_key(self) -> Tuple[bool, str, int, bool, str]:
        return (
            self.prefix is not None,
            self.prefix or "",
            self.number,
            self.suffix is not None,
            self.suffix or "",
        )

    def __lt__(self, other: "PageNumber") -> bool:
        return self.sort_key() < other.sort_key()

    def __le__(self, other: "PageNumber") -> bool:
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other: "PageNumber") -> bool:
        return self.sort_key() > other.sort_key()

    def __ge__(self, other: "PageNumber") -> bool:
        return self.sort_key() >= other.sort_key()

    def __str__(self) -> str:
        return f"{self.prefix or ''}{self.number}{self.suffix or ''}"


class Page(BaseModel):
    """Location of a score inside a book.

    ``end`` is absent for single-page scores.  Whether ``book`` exists
    and whether ``end`` comes after ``begin`` is checked by the page
    locator when the owning score is written.
    """

    book: int = Field(..., examples=[5])
    begin: PageNumber
    end: Optional[PageNumber] = None

    @property
    def last(self) -> PageNumber:
        """The last page covered; ``begin`` for single pages."""
        return self.end if self.end is not None else self.begin
