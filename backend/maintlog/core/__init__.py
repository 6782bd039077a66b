"""Core module - domain errors, logging and session lifecycle."""

from .exceptions import (
    MaintLogError,
    ValidationError,
    NotFoundError,
    ConflictError,
    UpstreamFailure,
    StorageError,
)

__all__ = [
    'MaintLogError', 'ValidationError', 'NotFoundError', 'ConflictError',
    'UpstreamFailure', 'StorageError',
]
