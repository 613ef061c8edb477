"""Translation of service errors into HTTP responses."""

from fastapi import HTTPException

from app.services.errors import ChatServiceError


def http_error(exc: ChatServiceError) -> HTTPException:
    """Uniform ``{"detail": message}`` failure carrying the error's status."""
    return HTTPException(status_code=exc.status_code, detail=str(exc))
