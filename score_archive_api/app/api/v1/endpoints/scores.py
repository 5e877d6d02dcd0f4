"""
Score endpoints for API v1.

These routes expose search and CRUD operations for scores.  Domain
errors raised by the services are rendered by the application-wide
``CatalogError`` handler, so handlers here only translate HTTP input
into service calls.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from score_archive_api.app.schemas.score import ScoreCreate, ScorePage, ScoreRead, ScoreUpdate, SearchField
from score_archive_api.app.services.score_service import ScoreService
from score_archive_api.app.services.search_service import SearchService

router = APIRouter()


@router.get("", response_model=ScorePage)
async def search_scores(
    value: str = Query(..., description="Text to look for"),
    fields: List[str] = Query(
        [],
        description="Fields to search in; repeat the parameter or separate names with commas",
    ),
    descending: bool = Query(False),
    page: int = Query(0, ge=0, description="Zero-based page index"),
    size: Optional[int] = Query(None, ge=1, description="Page size; clamped to the configured maximum"),
) -> ScorePage:
    """Search scores by any combination of fields.

    A score matches if ``value`` occurs (case-insensitively) in any of
    the given fields.  Results are ordered by title, ties by id.
    Unknown field names are rejected with HTTP 400 before the archive
    is queried.
    """
    search_fields = SearchField.parse(fields)
    return await SearchService.search_scores(
        search_fields,
        value,
        descending=descending,
        page=page,
        size=size,
    )


@router.post("", response_model=ScoreRead, status_code=status.HTTP_201_CREATED)
async def create_score(score: ScoreCreate) -> ScoreRead:
    """Create a new score.  The id is assigned by the server."""
    return await ScoreService.create_score(score)


@router.get("/{score_id}", response_model=ScoreRead)
async def get_score(score_id: int) -> ScoreRead:
    return await ScoreService.get_score(score_id)


@router.put("/{score_id}", response_model=ScoreRead)
async def put_score(score_id: int, score: ScoreUpdate) -> ScoreRead:
    """Replace an existing score.

    All fields are replaced; omitted list fields become empty and
    omitted optional fields are cleared.
    """
    return await ScoreService.update_score(score_id, score)


@router.delete("/{score_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_score(score_id: int) -> None:
    """Delete a score.

    Returns 404 if the score does not exist, including when it was
    already deleted.  Scores printed on its back lose their ``backOf``.
    """
    await ScoreService.delete_score(score_id)
    return None
