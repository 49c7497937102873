"""Domain entity representing a congregation announcement.

The entity is the only place where announcement invariants live:

* the title is 3 to 150 characters long and the content 1 to 5000;
* an archived announcement rejects every field edit;
* archiving, unarchiving and deleting are idempotent.

Validation runs in ``__post_init__`` so an instance rebuilt from storage is
checked exactly like a freshly created one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Final

from app.domain.exceptions import StateError, ValidationError
from app.utils import now_in_app_timezone

TITLE_MIN_LENGTH: Final[int] = 3
TITLE_MAX_LENGTH: Final[int] = 150
CONTENT_MAX_LENGTH: Final[int] = 5000


class Priority(str, Enum):
    """Priority levels for announcements."""

    NORMAL = "NORMAL"
    URGENT = "URGENT"


def validate_title(title: str | None) -> str:
    """Return the trimmed ``title`` or raise :class:`ValidationError`."""

    if not isinstance(title, str) or len(title.strip()) < TITLE_MIN_LENGTH:
        raise ValidationError(
            f"Announcement title must be at least {TITLE_MIN_LENGTH} characters long"
        )
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Announcement title cannot exceed {TITLE_MAX_LENGTH} characters"
        )
    return title.strip()


def validate_content(content: str | None) -> str:
    """Return the trimmed ``content`` or raise :class:`ValidationError`."""

    if not isinstance(content, str) or not content.strip():
        raise ValidationError("Announcement content cannot be empty")
    if len(content) > CONTENT_MAX_LENGTH:
        raise ValidationError(
            f"Announcement content cannot exceed {CONTENT_MAX_LENGTH} characters"
        )
    return content.strip()


def parse_priority(priority: Priority | str | None) -> Priority:
    """Coerce ``priority`` into :class:`Priority` or raise :class:`ValidationError`."""

    try:
        return Priority(priority)
    except ValueError as exc:
        raise ValidationError(f"Unknown announcement priority: {priority!r}") from exc


@dataclass
class Announcement:
    """A notice posted to the congregation."""

    id: str
    title: str
    content: str
    priority: Priority
    author_id: str
    published_at: datetime
    created_at: datetime
    updated_at: datetime
    archived_at: datetime | None = None
    deleted_at: datetime | None = None

    def __post_init__(self) -> None:
        self.title = validate_title(self.title)
        self.content = validate_content(self.content)
        self.priority = parse_priority(self.priority)

    @classmethod
    def create(
        cls,
        id: str,
        title: str,
        content: str,
        priority: Priority | str,
        author_id: str,
    ) -> "Announcement":
        """Build a published, non-archived, non-deleted announcement."""

        now = now_in_app_timezone()
        return cls(
            id=id,
            title=title,
            content=content,
            priority=priority,
            author_id=author_id,
            published_at=now,
            created_at=now,
            updated_at=now,
        )

    def is_archived(self) -> bool:
        return self.archived_at is not None

    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def is_urgent(self) -> bool:
        return self.priority is Priority.URGENT

    def is_active(self) -> bool:
        return not self.is_archived() and not self.is_deleted()

    def update_details(
        self,
        title: str | None = None,
        content: str | None = None,
        priority: Priority | str | None = None,
    ) -> None:
        """Apply the provided fields, leaving omitted ones untouched.

        Every field is validated before any of them is applied, so a rejected
        update leaves the announcement unchanged.
        """

        if self.is_archived():
            raise StateError("Cannot update an archived announcement")

        new_title = validate_title(title) if title is not None else self.title
        new_content = validate_content(content) if content is not None else self.content
        new_priority = parse_priority(priority) if priority is not None else self.priority

        self.title = new_title
        self.content = new_content
        self.priority = new_priority
        self.updated_at = now_in_app_timezone()

    def archive(self) -> bool:
        """Archive the announcement; return ``True`` when the state changed."""

        if self.is_archived():
            return False
        now = now_in_app_timezone()
        self.archived_at = now
        self.updated_at = now
        return True

    def unarchive(self) -> bool:
        """Restore an archived announcement; return ``True`` when the state changed."""

        if not self.is_archived():
            return False
        self.archived_at = None
        self.updated_at = now_in_app_timezone()
        return True

    def delete(self) -> bool:
        """Soft delete the announcement; a repeated call is a no-op."""

        if self.is_deleted():
            return False
        now = now_in_app_timezone()
        self.deleted_at = now
        self.updated_at = now
        return True


__all__ = [
    "Announcement",
    "CONTENT_MAX_LENGTH",
    "Priority",
    "TITLE_MAX_LENGTH",
    "TITLE_MIN_LENGTH",
    "parse_priority",
    "validate_content",
    "validate_title",
]
