"""
Domain exceptions for the booking platform.

Services raise these with a stable machine-readable ``code``; the handler
registered in ``main.py`` turns them into HTTP responses of the form
``{"detail": {"message", "code", "details"}}``.
"""

from typing import Any, Optional

from fastapi import status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(DomainException):
    """Bad or missing input, reported before any write."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class DependencyException(DomainException):
    """An external collaborator (storage, email, messaging) failed.

    Any write that happened before the failure stays committed.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
