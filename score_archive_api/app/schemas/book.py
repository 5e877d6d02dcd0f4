"""
Pydantic models for book data.

A book is a physical binder.  Scores point at the book they are
printed in through their ``location``; the book itself holds no list
of scores.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class BookBase(BaseModel):
    name: str = Field(..., min_length=1, examples=["Rot"])
    annotation: Optional[str] = Field(None, examples=["New covers"])

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v


class BookCreate(BookBase):
    """Schema for creating a book.  A supplied ``id`` is rejected."""

    id: Optional[int] = None


class BookUpdate(BookBase):
    """Schema for replacing a book; the body names the book to replace."""

    id: int = Field(..., examples=[5])


class BookRead(BookBase):
    """Schema for reading a book from the API."""

    id: int
