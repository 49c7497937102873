"""Pydantic models describing announcement payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import Priority


class AnnouncementCreate(BaseModel):
    """Payload used to publish a new announcement."""

    title: str = Field(..., description="Between 3 and 150 characters")
    content: str = Field(..., description="Between 1 and 5000 characters")
    priority: Priority = Priority.NORMAL


class AnnouncementUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    title: str | None = None
    content: str | None = None
    priority: Priority | None = None

    model_config = ConfigDict(extra="forbid")


class AnnouncementRead(BaseModel):
    """Representation of an announcement delivered to the client."""

    id: str
    title: str
    content: str
    priority: Priority
    author_id: str
    published_at: datetime
    archived_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


__all__ = ["AnnouncementCreate", "AnnouncementRead", "AnnouncementUpdate"]
