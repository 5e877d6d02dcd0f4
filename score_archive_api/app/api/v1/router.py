"""
Top‑level router for version 1 of the API.

This router aggregates the archive's domain routers under a unified
prefix.  Scores and books are exposed under the singular resource
names ``/score`` and ``/book``.
"""

from fastapi import APIRouter

from .endpoints import books, scores

router = APIRouter()

router.include_router(scores.router, prefix="/score", tags=["archive"])
router.include_router(books.router, prefix="/book", tags=["archive"])
