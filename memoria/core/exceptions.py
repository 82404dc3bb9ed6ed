"""Domain exceptions raised by the service layer.

Routers do not catch these; the handler registered in ``memoria.main`` turns
each one into a JSON ``{"detail": ...}`` response with ``status_code``.
"""

from fastapi import status


class MemoriaError(Exception):
    """Base exception for all application-specific errors."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(MemoriaError):
    """Raised when a user, friendship, follow, block or notification is missing."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(MemoriaError):
    """Raised when a relationship already exists or is no longer in the expected state."""

    # Clients treat duplicates as a bad request
    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(MemoriaError):
    """Raised when acting on another user's resource."""

    status_code = status.HTTP_403_FORBIDDEN


class InvalidArgumentError(MemoriaError):
    """Raised for self-follow, self-block, self-friend and similar bad input."""

    status_code = status.HTTP_400_BAD_REQUEST
