"""
Pydantic models for score data.

A score is the intellectual work, not a specific printed copy.  The
``ScoreBase`` class contains the fields shared by requests and
responses; ``ScoreCreate`` and ``ScoreUpdate`` are request bodies and
``ScoreRead`` is the response with the server-assigned ``id``.

Field names are exposed in camelCase (``subTitles``, ``backOf``).
Genres, contributors and aliases are sets: values are trimmed,
blank values dropped and duplicates removed.  ``subTitles`` is an
ordered list in which duplicates are kept.
"""

from enum import Enum
from typing import Iterable, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..core.errors import InvalidSearchField
from .page import Page


class ScoreBase(BaseModel):
    title: str = Field(..., min_length=1, examples=["baum"])
    genres: List[str] = Field(default_factory=list, examples=[["Marsch"]])
    composers: List[str] = Field(default_factory=list)
    arrangers: List[str] = Field(default_factory=list)
    publishers: List[str] = Field(default_factory=list)
    grade: Optional[str] = None
    alias: List[str] = Field(default_factory=list, examples=[["strauch", "teller"]])
    sub_titles: List[str] = Field(default_factory=list)
    annotation: Optional[str] = None
    back_of: Optional[int] = None
    location: Optional[Page] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v

    @field_validator("genres", "composers", "arrangers", "publishers", "alias")
    @classmethod
    def as_set(cls, values: List[str]) -> List[str]:
        seen: List[str] = []
        for value in values:
            value = value.strip()
            if value and value not in seen:
                seen.append(value)
        return seen


class ScoreCreate(ScoreBase):
    """Schema for creating a score.

    ``id`` is accepted only so that a client-supplied id can be
    rejected explicitly instead of silently ignored.
    """

    id: Optional[int] = None


class ScoreUpdate(ScoreBase):
    """Schema for replacing a score.

    All fields are replaced.  ``id`` may be omitted; if given it must
    match the id in the path.
    """

    id: Optional[int] = None


class ScoreRead(ScoreBase):
    """Schema for reading a score from the API."""

    id: int


class SearchField(str, Enum):
    """Score attributes a search can run against."""

    TITLE = "title"
    GENRE = "genre"
    SUB_TITLE = "subTitle"
    ARRANGER = "arranger"
    COMPOSER = "composer"
    ANNOTATION = "annotation"
    ALIAS = "alias"
    PUBLISHER = "publisher"

    @classmethod
    def parse(cls, raw: Iterable[str]) -> Set["SearchField"]:
        """Parse query values into search fields.

        Each value may hold several comma-separated names.  Names are
        matched case-insensitively, so ``SubTitle`` and ``subtitle``
        both select ``subTitle``.

        Raises
        ------
        InvalidSearchField
            If any name is not a known search field.
        """
        by_name = {member.value.lower(): member for member in cls}
        fields: Set[SearchField] = set()
        for item in raw:
            for name in item.split(","):
                name = name.strip()
                if not name:
                    continue
                member = by_name.get(name.lower())
                if member is None:
                    raise InvalidSearchField(f"Unknown search field '{name}'", field="fields")
                fields.add(member)
        return fields


class ScorePage(BaseModel):
    """One page of search results."""

    items: List[ScoreRead]
    page: int
    size: int
    total: int
    total_pages: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
