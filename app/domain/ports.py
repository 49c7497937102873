"""Interfaces the announcement core depends on.

Infrastructure adapters implement these protocols structurally; tests swap in
in-memory fakes through the service constructors.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from app.domain.entities import Announcement, EmailMessage, Member


class AnnouncementRepositoryPort(Protocol):
    """Persistence operations for announcements. Each call is atomic."""

    def persist(self, announcement: Announcement) -> Announcement: ...

    def find_by_id(self, announcement_id: str) -> Announcement | None:
        """Return the announcement unless it is missing or soft deleted."""
        ...

    def update(self, announcement: Announcement) -> Announcement: ...

    def archive(self, announcement_id: str, archived_at: datetime | None = None) -> None:
        """Stamp the archive time unless the announcement is already archived."""
        ...

    def delete(self, announcement_id: str, deleted_at: datetime | None = None) -> None:
        """Soft delete; an already deleted announcement keeps its timestamp."""
        ...

    def list_active(self) -> Sequence[Announcement]: ...

    def list_archived(self) -> Sequence[Announcement]: ...


class MemberLookup(Protocol):
    """Read access to the member directory."""

    def find_by_id(self, member_id: str) -> Member | None: ...

    def find_all(self) -> Sequence[Member]:
        """Return every member that is not soft deleted."""
        ...


class EmailGateway(Protocol):
    """Transport that delivers a single email."""

    async def send(self, message: EmailMessage) -> None:
        """Deliver ``message`` or raise an exception describing the failure."""
        ...


__all__ = ["AnnouncementRepositoryPort", "EmailGateway", "MemberLookup"]
