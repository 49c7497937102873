"""Errors raised by the announcement domain and its use cases."""

from __future__ import annotations


class AnnouncementError(ValueError):
    """Base class for every error raised by the announcement core."""


class ValidationError(AnnouncementError):
    """A title, content, priority or identifier is out of bounds."""


class InvalidIdentifierError(ValidationError):
    """An identifier is not a UUID-shaped string."""


class NotFoundError(AnnouncementError):
    """The referenced author or announcement does not exist."""


class AuthorizationError(AnnouncementError):
    """The acting member is not allowed to manage announcements."""


class StateError(AnnouncementError):
    """The announcement is in a state that forbids the requested change."""


class DispatchError(AnnouncementError):
    """Delivering a notification to a single recipient failed."""


class EmailDeliveryError(DispatchError):
    """The email transport refused or could not deliver a message."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "AnnouncementError",
    "AuthorizationError",
    "DispatchError",
    "EmailDeliveryError",
    "InvalidIdentifierError",
    "NotFoundError",
    "StateError",
    "ValidationError",
]
