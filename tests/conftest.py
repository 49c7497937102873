"""Shared fixtures and in-memory port implementations for the test-suite."""

from __future__ import annotations

import asyncio
import os
import sys
import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure the project root (which contains the ``app`` package) is importable
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("APP_TIMEZONE", "UTC")

from app.domain.entities import Announcement, EmailMessage, Member, MemberRole  # noqa: E402


class InMemoryAnnouncementRepository:
    """Announcement repository keeping copies of the aggregates in a dict."""

    def __init__(self) -> None:
        self.items: dict[str, Announcement] = {}
        self.lookups: list[str] = []

    def persist(self, announcement: Announcement) -> Announcement:
        self.items[announcement.id] = replace(announcement)
        return replace(announcement)

    def find_by_id(self, announcement_id: str) -> Announcement | None:
        self.lookups.append(announcement_id)
        announcement = self.items.get(announcement_id)
        if announcement is None or announcement.is_deleted():
            return None
        return replace(announcement)

    def update(self, announcement: Announcement) -> Announcement:
        self.items[announcement.id] = replace(announcement)
        return replace(announcement)

    def archive(self, announcement_id: str, archived_at: datetime | None = None) -> None:
        announcement = self.items[announcement_id]
        if announcement.archived_at is None:
            stamp = archived_at or datetime.now(timezone.utc)
            announcement.archived_at = announcement.updated_at = stamp

    def delete(self, announcement_id: str, deleted_at: datetime | None = None) -> None:
        announcement = self.items[announcement_id]
        if announcement.deleted_at is None:
            stamp = deleted_at or datetime.now(timezone.utc)
            announcement.deleted_at = announcement.updated_at = stamp

    def list_active(self) -> list[Announcement]:
        return [replace(a) for a in self.items.values() if a.is_active()]

    def list_archived(self) -> list[Announcement]:
        return [
            replace(a) for a in self.items.values() if a.is_archived() and not a.is_deleted()
        ]


class InMemoryMemberLookup:
    """Member lookup over a fixed list of members."""

    def __init__(self, members: list[Member] | None = None) -> None:
        self.members = list(members or [])
        self.lookups: list[str] = []

    def add(self, member: Member) -> Member:
        self.members.append(member)
        return member

    def find_by_id(self, member_id: str) -> Member | None:
        self.lookups.append(member_id)
        for member in self.members:
            if member.id == member_id and not member.is_deleted():
                return member
        return None

    def find_all(self) -> list[Member]:
        return [member for member in self.members if not member.is_deleted()]


class RecordingEmailGateway:
    """Email gateway that records messages and can fail or hang on demand."""

    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []
        self.attempted: list[str] = []
        self.fail_for: set[str] = set()
        self.hang_for: set[str] = set()
        self.in_flight = 0
        self.max_in_flight = 0

    async def send(self, message: EmailMessage) -> None:
        self.attempted.append(message.to)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            # Yield so every send of the batch is started before any finishes.
            await asyncio.sleep(0)
            if message.to in self.hang_for:
                await asyncio.Event().wait()
            if message.to in self.fail_for:
                raise RuntimeError("mailbox unavailable")
            self.sent.append(message)
        finally:
            self.in_flight -= 1


def make_member(
    role: MemberRole = MemberRole.MEMBER,
    *,
    first_name: str = "Ruth",
    last_name: str = "Moab",
    **overrides,
) -> Member:
    member_id = overrides.pop("id", str(uuid.uuid4()))
    values = {
        "id": member_id,
        "email": f"{member_id[:8]}@example.com",
        "first_name": first_name,
        "last_name": last_name,
        "role": role,
    }
    values.update(overrides)
    return Member(**values)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def member_factory():
    return make_member


@pytest.fixture
def announcements() -> InMemoryAnnouncementRepository:
    return InMemoryAnnouncementRepository()


@pytest.fixture
def members() -> InMemoryMemberLookup:
    return InMemoryMemberLookup()


@pytest.fixture
def gateway() -> RecordingEmailGateway:
    return RecordingEmailGateway()


@pytest.fixture
def admin(members: InMemoryMemberLookup) -> Member:
    return members.add(make_member(MemberRole.ADMIN, first_name="Ezra", last_name="Scribe"))


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch):
    """Replace the announcement clock with one that advances a minute per call."""

    from app.domain.entities import announcement as announcement_module

    state = {"now": datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)}

    def _tick() -> datetime:
        state["now"] += timedelta(minutes=1)
        return state["now"]

    monkeypatch.setattr(announcement_module, "now_in_app_timezone", _tick)
    return state
