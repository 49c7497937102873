"""Domain entity representing a congregation member."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class MemberRole(str, Enum):
    """Roles a member can hold in the portal."""

    ADMIN = "ADMIN"
    STAFF = "STAFF"
    MEMBER = "MEMBER"


ANNOUNCEMENT_MANAGER_ROLES = frozenset({MemberRole.ADMIN, MemberRole.STAFF})


@dataclass
class Member:
    """Snapshot of the member attributes the announcement core relies on."""

    id: str
    email: str
    first_name: str
    last_name: str
    role: MemberRole
    email_notifications: bool = True
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        self.role = MemberRole(self.role)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def can_manage_announcements(self) -> bool:
        """Return ``True`` when the member may create or change announcements."""

        return self.role in ANNOUNCEMENT_MANAGER_ROLES


__all__ = ["ANNOUNCEMENT_MANAGER_ROLES", "Member", "MemberRole"]
