"""
Domain exceptions.

Each exception carries the HTTP status it maps to; ``main.py`` installs a
single handler that renders them as ``{"detail": message}``.
"""

from fastapi import status


class MaintLogError(Exception):
    """Base class for errors reported to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MaintLogError):
    """Missing or empty required input. No side effects were performed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(MaintLogError):
    """The referenced resource does not exist or is not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(MaintLogError):
    """The request contradicts the current state of the resource."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource state conflict"


class UpstreamFailure(MaintLogError):
    """The language model gateway was unreachable or returned an error."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "The AI assistant is temporarily unavailable. Please try again."


class StorageError(MaintLogError):
    """A storage write reported failure."""

    default_message = "Internal server error"
