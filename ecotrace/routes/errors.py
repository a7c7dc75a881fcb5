"""
Translation of engine errors to HTTP responses.
"""

from fastapi import HTTPException, status

from ecotrace.core.errors import EngineError, IllegalTransitionError, NotFoundError


def to_http_exception(e: EngineError) -> HTTPException:
    """404 for unknown ids, 409 for illegal transitions, 400 for bad input."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, IllegalTransitionError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
