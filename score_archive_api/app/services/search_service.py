"""
Score search.

A query names one or more search fields and a value.  A score matches
when the value occurs as a case-insensitive substring in any of the
named attributes.  An empty set of fields matches nothing and yields
an empty page without touching the store.

Pages are zero-indexed.  The page size defaults to
``settings.default_page_size`` and is clamped to
``settings.max_page_size``.
"""

import logging
import math
import sqlite3
from typing import List, Optional, Set, Tuple

from ..core.config import settings
from ..core.db import run_in_transaction
from ..repositories.score_repository import ScoreRepository
from ..schemas.score import ScorePage, ScoreRead, SearchField

# Largest OFFSET SQLite accepts; pages beyond it are simply empty.
MAX_OFFSET = 2**63 - 1


class SearchService:
    @classmethod
    def page_size(cls, size: Optional[int]) -> int:
        if size is None:
            size = settings.default_page_size
        return max(1, min(size, settings.max_page_size))

    @classmethod
    async def search_scores(
        cls,
        fields: Set[SearchField],
        value: str,
        descending: bool = False,
        page: int = 0,
        size: Optional[int] = None,
    ) -> ScorePage:
        """Return one page of scores matching ``value`` in any of ``fields``.

        Ordered case-insensitively by title, ascending unless
        ``descending``; scores with equal titles are always ordered by ascending id.
        """
        logger = logging.getLogger(__name__)
        size = cls.page_size(size)
        page = max(0, page)
        offset = min(page * size, MAX_OFFSET)
        if not fields:
            return ScorePage(items=[], page=page, size=size, total=0, total_pages=0)

        def work(cursor: sqlite3.Cursor) -> Tuple[List[ScoreRead], int]:
            return ScoreRepository(cursor).search(
                fields, value, descending, limit=size, offset=offset
            )

        items, total = await run_in_transaction(work, write=False)
        logger.debug(
            "Search %s for '%s' matched %s scores",
            sorted(field.value for field in fields),
            value,
            total,
        )
        return ScorePage(
            items=items,
            page=page,
            size=size,
            total=total,
            total_pages=math.ceil(total / size),
        )
