"""Use cases that create and change announcements."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from functools import partial
from typing import Any

import anyio

from app.application.use_cases.notifications import NotificationDispatcher
from app.domain.entities import Announcement, Member, Priority
from app.domain.exceptions import AnnouncementError, AuthorizationError, NotFoundError
from app.domain.ports import AnnouncementRepositoryPort, MemberLookup

from .validators import ensure_valid_identifier

logger = logging.getLogger(__name__)


@contextmanager
def _logged(operation: str, **context: Any) -> Iterator[None]:
    try:
        yield
    except AnnouncementError as exc:
        logger.warning("Failed to %s (%s): %s", operation, context, exc)
        raise


class AnnouncementLifecycleService:
    """Orchestrate announcement changes on behalf of an authorized member.

    Every mutating operation checks, in order: identifiers are well formed,
    the acting member exists, the member is ADMIN or STAFF, the target exists.
    Only creation of an URGENT announcement triggers the notification fan-out,
    which runs detached and never affects the result of the call.

    The repository and member lookup are blocking, so each operation runs its
    port calls in a worker thread and the event loop keeps serving in-flight
    notification runs.
    """

    def __init__(
        self,
        announcements: AnnouncementRepositoryPort,
        members: MemberLookup,
        dispatcher: NotificationDispatcher,
    ) -> None:
        self._announcements = announcements
        self._members = members
        self._dispatcher = dispatcher

    async def create_announcement(
        self,
        author_id: str,
        title: str,
        content: str,
        priority: Priority | str = Priority.NORMAL,
    ) -> Announcement:
        """Publish a new announcement and return the persisted record."""

        created, author = await anyio.to_thread.run_sync(
            partial(self._create, author_id, title, content, priority)
        )
        if created.is_urgent():
            self._schedule_notifications(created, author)
        return created

    async def update_announcement(
        self,
        announcement_id: str,
        user_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
        priority: Priority | str | None = None,
    ) -> Announcement:
        """Apply a partial update to an announcement that is not archived."""

        return await anyio.to_thread.run_sync(
            partial(
                self._update,
                announcement_id,
                user_id,
                title=title,
                content=content,
                priority=priority,
            )
        )

    async def archive_announcement(self, announcement_id: str, user_id: str) -> None:
        """Archive an announcement; archiving it again changes nothing."""

        await anyio.to_thread.run_sync(self._archive, announcement_id, user_id)

    async def unarchive_announcement(self, announcement_id: str, user_id: str) -> None:
        """Return an archived announcement to the main feed."""

        await anyio.to_thread.run_sync(self._unarchive, announcement_id, user_id)

    async def delete_announcement(self, announcement_id: str, user_id: str) -> None:
        """Soft delete an announcement."""

        await anyio.to_thread.run_sync(self._delete, announcement_id, user_id)

    async def get_announcement(self, announcement_id: str) -> Announcement:
        """Return a visible announcement or raise :class:`NotFoundError`."""

        with _logged("fetch announcement", id=announcement_id):
            ensure_valid_identifier(announcement_id, label="announcement ID")
            return await anyio.to_thread.run_sync(
                self._require_announcement, announcement_id
            )

    async def list_announcements(self, *, archived: bool = False) -> Sequence[Announcement]:
        """Return active announcements, or only archived ones when ``archived``."""

        if archived:
            return await anyio.to_thread.run_sync(self._announcements.list_archived)
        return await anyio.to_thread.run_sync(self._announcements.list_active)

    def _create(
        self, author_id: str, title: str, content: str, priority: Priority | str
    ) -> tuple[Announcement, Member]:
        with _logged("create announcement", author_id=author_id):
            ensure_valid_identifier(author_id, label="author ID")
            author = self._require_manager(author_id)

            announcement = Announcement.create(
                id=str(uuid.uuid4()),
                title=title,
                content=content,
                priority=priority,
                author_id=author.id,
            )
            created = self._announcements.persist(announcement)

        logger.info(
            "Announcement %s created by %s with priority %s",
            created.id,
            author.id,
            created.priority.value,
        )
        return created, author

    def _update(
        self,
        announcement_id: str,
        user_id: str,
        *,
        title: str | None,
        content: str | None,
        priority: Priority | str | None,
    ) -> Announcement:
        with _logged("update announcement", id=announcement_id, user_id=user_id):
            announcement = self._load_for_change(announcement_id, user_id)
            announcement.update_details(title=title, content=content, priority=priority)
            updated = self._announcements.update(announcement)

        logger.info("Announcement %s updated by %s", announcement_id, user_id)
        return updated

    def _archive(self, announcement_id: str, user_id: str) -> None:
        with _logged("archive announcement", id=announcement_id, user_id=user_id):
            announcement = self._load_for_change(announcement_id, user_id)
            if not announcement.archive():
                logger.info("Announcement %s is already archived", announcement_id)
                return
            self._announcements.archive(announcement_id, announcement.archived_at)

        logger.info("Announcement %s archived by %s", announcement_id, user_id)

    def _unarchive(self, announcement_id: str, user_id: str) -> None:
        with _logged("unarchive announcement", id=announcement_id, user_id=user_id):
            announcement = self._load_for_change(announcement_id, user_id)
            if not announcement.unarchive():
                logger.info("Announcement %s is not archived", announcement_id)
                return
            self._announcements.update(announcement)

        logger.info("Announcement %s unarchived by %s", announcement_id, user_id)

    def _delete(self, announcement_id: str, user_id: str) -> None:
        with _logged("delete announcement", id=announcement_id, user_id=user_id):
            announcement = self._load_for_change(announcement_id, user_id)
            if announcement.delete():
                self._announcements.delete(announcement_id, announcement.deleted_at)

        logger.info("Announcement %s deleted by %s", announcement_id, user_id)

    def _load_for_change(self, announcement_id: str, user_id: str) -> Announcement:
        ensure_valid_identifier(announcement_id, label="announcement ID")
        ensure_valid_identifier(user_id, label="user ID")
        self._require_manager(user_id)
        return self._require_announcement(announcement_id)

    def _require_manager(self, member_id: str) -> Member:
        member = self._members.find_by_id(member_id)
        if member is None:
            raise NotFoundError("User not found")
        if not member.can_manage_announcements():
            raise AuthorizationError(
                "Only administrators and staff can manage announcements"
            )
        return member

    def _require_announcement(self, announcement_id: str) -> Announcement:
        announcement = self._announcements.find_by_id(announcement_id)
        if announcement is None or announcement.is_deleted():
            raise NotFoundError("Announcement not found")
        return announcement

    def _schedule_notifications(self, announcement: Announcement, author: Member) -> None:
        try:
            self._dispatcher.schedule(announcement, author)
        except Exception:
            logger.exception(
                "Could not schedule notifications for urgent announcement %s",
                announcement.id,
            )


__all__ = ["AnnouncementLifecycleService"]
