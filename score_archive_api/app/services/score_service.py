"""
Business logic for scores.

``ScoreService`` creates, reads, replaces and deletes scores.  Each
operation runs as one transaction through ``run_in_transaction``:
the payload is validated against the store (location, ``backOf``)
and written in the same transaction, so a failed validation never
leaves a partial write behind.

Policies:

* Deleting a score that does not exist raises ``NotFound``; repeating
  a delete therefore fails the same way every time.
* Deleting a score clears ``backOf`` on every score that pointed at it.
* ``backOf`` may not point at the score itself.  Longer cycles
  (A on the back of B and B on the back of A) are allowed, since the
  two sides of a sheet naturally reference each other.
"""

import logging
import sqlite3
from typing import Optional

from ..core.db import run_in_transaction
from ..core.errors import IdNotAllowed, NotFound, SelfReference
from ..repositories.book_repository import BookRepository
from ..repositories.score_repository import ScoreRepository
from ..schemas.score import ScoreBase, ScoreCreate, ScoreRead, ScoreUpdate
from .page_locator import PageLocator


class ScoreService:
    """Service class for managing scores."""

    @classmethod
    async def create_score(cls, data: ScoreCreate) -> ScoreRead:
        """Insert a new score and return it with its assigned id.

        Raises ``IdNotAllowed`` if the payload carries an id.
        """
        logger = logging.getLogger(__name__)
        if data.id is not None:
            raise IdNotAllowed("Score ids are assigned by the server", field="id")

        def work(cursor: sqlite3.Cursor) -> ScoreRead:
            scores = ScoreRepository(cursor)
            cls._validate_references(scores, BookRepository(cursor), data)
            score_id = scores.insert(data)
            cls._flag_overlaps(scores, score_id, data)
            return scores.get(score_id)

        score = await run_in_transaction(work)
        logger.info("Created score %s '%s'", score.id, score.title)
        return score

    @classmethod
    async def get_score(cls, score_id: int) -> ScoreRead:
        """Retrieve a single score by id or raise ``NotFound``."""

        def work(cursor: sqlite3.Cursor) -> Optional[ScoreRead]:
            return ScoreRepository(cursor).get(score_id)

        score = await run_in_transaction(work, write=False)
        if score is None:
            raise NotFound(f"Score {score_id} not found", field="id")
        return score

    @classmethod
    async def update_score(cls, score_id: int, data: ScoreUpdate) -> ScoreRead:
        """Replace every field of an existing score.

        Location and ``backOf`` are validated exactly as on creation.
        """
        logger = logging.getLogger(__name__)
        if data.id is not None and data.id != score_id:
            raise IdNotAllowed(
                f"Body id {data.id} does not match score {score_id}", field="id"
            )
        if data.back_of == score_id:
            raise SelfReference(f"Score {score_id} cannot be on its own back", field="backOf")

        def work(cursor: sqlite3.Cursor) -> ScoreRead:
            scores = ScoreRepository(cursor)
            if not scores.exists(score_id):
                raise NotFound(f"Score {score_id} not found", field="id")
            cls._validate_references(scores, BookRepository(cursor), data)
            scores.replace(score_id, data)
            cls._flag_overlaps(scores, score_id, data)
            return scores.get(score_id)

        score = await run_in_transaction(work)
        logger.info("Updated score %s", score_id)
        return score

    @classmethod
    async def delete_score(cls, score_id: int) -> None:
        """Delete a score and detach the scores printed on its back."""
        logger = logging.getLogger(__name__)

        def work(cursor: sqlite3.Cursor) -> None:
            scores = ScoreRepository(cursor)
            if not scores.exists(score_id):
                raise NotFound(f"Score {score_id} not found", field="id")
            detached = scores.clear_back_of(score_id)
            scores.delete(score_id)
            if detached:
                logger.info("Cleared backOf of scores %s", detached)

        await run_in_transaction(work)
        logger.info("Deleted score %s", score_id)

    @staticmethod
    def _validate_references(scores: ScoreRepository, books: BookRepository, data: ScoreBase) -> None:
        if data.back_of is not None and not scores.exists(data.back_of):
            raise NotFound(f"Score {data.back_of} referenced by backOf not found", field="backOf")
        if data.location is not None:
            PageLocator.validate(books, data.location)

    @staticmethod
    def _flag_overlaps(scores: ScoreRepository, score_id: int, data: ScoreBase) -> None:
        if data.location is None:
            return
        overlapping = PageLocator.find_overlaps(
            data.location, score_id, scores.list_in_book(data.location.book)
        )
        if overlapping:
            logger = logging.getLogger(__name__)
            logger.warning(
                "Score %s in book %s overlaps scores %s",
                score_id,
                data.location.book,
                overlapping,
            )
