"""
Error taxonomy of the archive service.

Services raise subclasses of ``CatalogError``; the application
registers a single exception handler (see ``main.py``) that turns
them into JSON responses.  Each error knows its HTTP status code and,
where it can be attributed, the payload field that caused it.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class CatalogError(Exception):
    """Base class for all domain errors raised by the service layer."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "catalog_error"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_detail(self) -> Dict[str, Any]:
        return {"detail": self.message, "error": self.code, "field": self.field}


class NotFound(CatalogError):
    """A referenced score or book does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class InvalidLocation(CatalogError):
    """A location points at a book that does not exist."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "invalid_location"


class InvalidRange(CatalogError):
    """A location ends before it begins."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "invalid_range"


class InvalidSearchField(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_search_field"


class SelfReference(CatalogError):
    """A score claims to be printed on its own back."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "self_reference"


class IdNotAllowed(CatalogError):
    """The client supplied an id where the server assigns it."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "id_not_allowed"


class Conflict(CatalogError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class Unavailable(CatalogError):
    """The store stayed busy after all retry attempts."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "unavailable"
