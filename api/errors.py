"""Mapping from domain and persistence errors to HTTP errors."""

from fastapi import HTTPException

from database.exceptions import DatabaseError, DuplicateError, IntegrityError, NotFoundError
from scoring.exceptions import ConflictError, ForbiddenError, InvalidRequestError, ScoringError

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (DuplicateError, 409),
    (IntegrityError, 409),
    (ForbiddenError, 403),
    (InvalidRequestError, 400),
    (ConflictError, 409),
)


def http_error(exc: Exception, *, not_found: str = "Not found") -> HTTPException:
    """Translate a ScoringError or DatabaseError raised by the domain into an HTTPException."""
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            if status == 404:
                return HTTPException(404, not_found)
            detail = exc.message if isinstance(exc, ScoringError) else str(exc)
            return HTTPException(status, detail)
    return HTTPException(500, "Internal server error")


DOMAIN_ERRORS = (ScoringError, DatabaseError)
