"""
Top‑level package for the Score Archive API.

The catalog of the sheet-music archive: scores, the books that bind
them and the pages where each score is printed.  All functionality
lives in submodules under ``app``.
"""

__all__ = []
