"""Tests for the announcement lifecycle use cases."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid

import pytest

from app.application.use_cases.announcements import AnnouncementLifecycleService
from app.application.use_cases.notifications import NotificationDispatcher, RecipientSelector
from app.domain.entities import MemberRole, Priority
from app.domain.exceptions import (
    AuthorizationError,
    InvalidIdentifierError,
    NotFoundError,
    StateError,
    ValidationError,
)


class SpyDispatcher:
    """Dispatcher stand-in that records scheduling requests."""

    def __init__(self, error: Exception | None = None) -> None:
        self.scheduled: list[tuple[str, str]] = []
        self.error = error

    def schedule(self, announcement, author):
        self.scheduled.append((announcement.id, author.id))
        if self.error is not None:
            raise self.error


@pytest.fixture
def dispatcher() -> SpyDispatcher:
    return SpyDispatcher()


@pytest.fixture
def service(announcements, members, dispatcher) -> AnnouncementLifecycleService:
    return AnnouncementLifecycleService(announcements, members, dispatcher)


async def _publish(service, author, **overrides):
    values = {
        "title": "Baptism class",
        "content": "Class starts next Sabbath afternoon.",
        "priority": Priority.NORMAL,
    }
    values.update(overrides)
    return await service.create_announcement(author.id, **values)


@pytest.mark.anyio
async def test_create_persists_and_returns_record(service, announcements, admin) -> None:
    created = await _publish(service, admin, title="  Baptism class ")

    assert created.title == "Baptism class"
    assert created.author_id == admin.id
    assert uuid.UUID(created.id)
    assert announcements.items[created.id].title == "Baptism class"


@pytest.mark.anyio
async def test_priority_defaults_to_normal(service, admin) -> None:
    created = await service.create_announcement(admin.id, "Hymn night", "Friday 7pm")

    assert created.priority is Priority.NORMAL


@pytest.mark.anyio
async def test_staff_can_create(service, members, member_factory) -> None:
    staff = members.add(member_factory(MemberRole.STAFF))

    created = await _publish(service, staff)

    assert created.author_id == staff.id


@pytest.mark.anyio
async def test_create_with_unknown_author_fails(service, member_factory) -> None:
    with pytest.raises(NotFoundError):
        await _publish(service, member_factory())


@pytest.mark.anyio
async def test_create_by_plain_member_is_forbidden(
    service, members, member_factory, announcements
) -> None:
    member = members.add(member_factory(MemberRole.MEMBER))

    with pytest.raises(AuthorizationError):
        await _publish(service, member)
    assert announcements.items == {}


@pytest.mark.anyio
async def test_create_propagates_validation_errors(service, admin, announcements) -> None:
    with pytest.raises(ValidationError):
        await _publish(service, admin, title="ab")
    assert announcements.items == {}


@pytest.mark.anyio
async def test_create_rejects_malformed_author_before_lookup(service, members) -> None:
    with pytest.raises(InvalidIdentifierError):
        await service.create_announcement("not-a-uuid", "Title", "Content")
    assert members.lookups == []


@pytest.mark.anyio
async def test_urgent_create_schedules_dispatch(service, dispatcher, admin) -> None:
    created = await _publish(service, admin, priority=Priority.URGENT)

    assert dispatcher.scheduled == [(created.id, admin.id)]


@pytest.mark.anyio
async def test_normal_create_never_invokes_dispatcher(service, dispatcher, admin) -> None:
    await _publish(service, admin, priority=Priority.NORMAL)

    assert dispatcher.scheduled == []


@pytest.mark.anyio
async def test_dispatch_scheduling_failure_does_not_fail_create(
    announcements, members, admin, caplog
) -> None:
    service = AnnouncementLifecycleService(
        announcements, members, SpyDispatcher(error=RuntimeError("no event loop"))
    )

    with caplog.at_level(logging.ERROR):
        created = await _publish(service, admin, priority=Priority.URGENT)

    assert created.id in announcements.items
    assert "Could not schedule notifications" in caplog.text


@pytest.mark.anyio
async def test_urgent_create_returns_before_emails_are_sent(
    announcements, members, admin, gateway, member_factory
) -> None:
    for _ in range(25):
        members.add(member_factory())
    dispatcher = NotificationDispatcher(RecipientSelector(members), gateway, batch_delay=0)
    service = AnnouncementLifecycleService(announcements, members, dispatcher)

    created = await _publish(service, admin, priority=Priority.URGENT)

    assert created.is_urgent()
    assert gateway.sent == []
    assert dispatcher.pending == 1

    await dispatcher.drain(timeout=5)

    assert len(gateway.sent) == 25
    assert {message.subject for message in gateway.sent} == {"URGENT: Baptism class"}


@pytest.mark.anyio
async def test_update_applies_partial_changes(service, admin, dispatcher) -> None:
    created = await _publish(service, admin)

    updated = await service.update_announcement(
        created.id, admin.id, content="Moved to Sunday.", priority=Priority.URGENT
    )

    assert updated.title == created.title
    assert updated.content == "Moved to Sunday."
    assert updated.priority is Priority.URGENT
    assert dispatcher.scheduled == []


@pytest.mark.anyio
async def test_update_archived_announcement_fails(service, admin) -> None:
    created = await _publish(service, admin)
    await service.archive_announcement(created.id, admin.id)

    with pytest.raises(StateError):
        await service.update_announcement(created.id, admin.id, title="New title")


@pytest.mark.anyio
async def test_update_requires_authorized_member(service, members, admin, member_factory) -> None:
    created = await _publish(service, admin)
    member = members.add(member_factory())

    with pytest.raises(AuthorizationError):
        await service.update_announcement(created.id, member.id, title="Hijacked")


@pytest.mark.anyio
async def test_malformed_ids_are_rejected_before_any_lookup(
    service, admin, members, announcements
) -> None:
    members.lookups.clear()

    with pytest.raises(InvalidIdentifierError):
        await service.archive_announcement("123", admin.id)
    with pytest.raises(InvalidIdentifierError):
        await service.delete_announcement(str(uuid.uuid4()), "nobody")
    with pytest.raises(InvalidIdentifierError):
        await service.update_announcement("../etc", admin.id, title="Title")

    assert members.lookups == []
    assert announcements.lookups == []


@pytest.mark.anyio
async def test_archive_unknown_announcement_fails(service, admin) -> None:
    with pytest.raises(NotFoundError):
        await service.archive_announcement(str(uuid.uuid4()), admin.id)


@pytest.mark.anyio
async def test_archive_twice_succeeds_without_state_change(
    service, admin, announcements
) -> None:
    created = await _publish(service, admin)

    await service.archive_announcement(created.id, admin.id)
    archived_at = announcements.items[created.id].archived_at
    await service.archive_announcement(created.id, admin.id)

    assert archived_at is not None
    assert announcements.items[created.id].archived_at == archived_at


@pytest.mark.anyio
async def test_unarchive_returns_announcement_to_feed(service, admin) -> None:
    created = await _publish(service, admin)
    await service.archive_announcement(created.id, admin.id)

    assert [a.id for a in await service.list_announcements(archived=True)] == [created.id]

    await service.unarchive_announcement(created.id, admin.id)
    await service.unarchive_announcement(created.id, admin.id)

    assert [a.id for a in await service.list_announcements()] == [created.id]
    assert await service.list_announcements(archived=True) == []


@pytest.mark.anyio
async def test_deleted_announcement_is_hidden(service, admin) -> None:
    created = await _publish(service, admin)

    await service.delete_announcement(created.id, admin.id)

    with pytest.raises(NotFoundError):
        await service.get_announcement(created.id)
    assert await service.list_announcements() == []
    with pytest.raises(NotFoundError):
        await service.delete_announcement(created.id, admin.id)


@pytest.mark.anyio
async def test_get_announcement_validates_identifier(service) -> None:
    with pytest.raises(InvalidIdentifierError):
        await service.get_announcement("42")
    with pytest.raises(NotFoundError):
        await service.get_announcement(str(uuid.uuid4()))


@pytest.mark.anyio
async def test_blocking_repository_does_not_stall_other_tasks(
    service, announcements, admin, monkeypatch
) -> None:
    persist = announcements.persist

    def slow_persist(announcement):
        time.sleep(0.5)
        return persist(announcement)

    monkeypatch.setattr(announcements, "persist", slow_persist)

    gaps: list[float] = []
    finished = asyncio.Event()

    async def ticker() -> None:
        loop = asyncio.get_running_loop()
        last = loop.time()
        while not finished.is_set():
            await asyncio.sleep(0.01)
            now = loop.time()
            gaps.append(now - last)
            last = now

    ticking = asyncio.create_task(ticker())
    try:
        await _publish(service, admin)
    finally:
        finished.set()
        await ticking

    assert len(gaps) > 5
    assert max(gaps) < 0.2


@pytest.mark.anyio
async def test_stored_timestamps_match_the_aggregate(
    service, admin, announcements, clock
) -> None:
    created = await _publish(service, admin)

    await service.archive_announcement(created.id, admin.id)
    archived = announcements.items[created.id]
    assert archived.archived_at == clock["now"]
    assert archived.updated_at == clock["now"]

    await service.delete_announcement(created.id, admin.id)
    deleted = announcements.items[created.id]
    assert deleted.deleted_at == clock["now"]
    assert deleted.archived_at == archived.archived_at
