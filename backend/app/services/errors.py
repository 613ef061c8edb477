"""Error kinds raised by the message services.

Every error carries the HTTP status the API layer answers with, so routes
can translate any of them into a uniform ``{"detail": ...}`` response.
"""


class ChatServiceError(Exception):
    """Base class for failures reported to the caller."""

    status_code: int = 400


class ValidationError(ChatServiceError):
    """Malformed input such as an id that is not ``owner/name``."""

    status_code = 422


class NotFoundError(ChatServiceError):
    """A referenced chat or message does not exist."""

    status_code = 404


class UnauthorizedError(ChatServiceError):
    """The caller may not perform the operation."""

    status_code = 403


class ConflictError(ChatServiceError):
    """Another request holds the chat's regenerate lock."""

    status_code = 409


class DispatchFailure(ChatServiceError):
    """A placeholder, IM or email step failed after the primary write."""

    status_code = 502


class RepositoryError(ChatServiceError):
    """Underlying storage failure."""

    status_code = 500
