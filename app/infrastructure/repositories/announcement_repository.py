"""Persistence layer for announcement data."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Query, Session

from app.domain.entities import Announcement
from app.infrastructure.models import AnnouncementModel
from app.utils import from_storage_datetime, now_in_app_timezone, to_storage_datetime


class AnnouncementRepository:
    """Provide persistence operations for :class:`Announcement` aggregates."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def persist(self, announcement: Announcement) -> Announcement:
        model = AnnouncementModel()
        self._apply_entity_to_model(model, announcement, include_creation_fields=True)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def find_by_id(self, announcement_id: str) -> Announcement | None:
        model = self._visible().filter(AnnouncementModel.id == announcement_id).first()
        return self._to_entity(model) if model else None

    def update(self, announcement: Announcement) -> Announcement:
        model = self._visible().filter(AnnouncementModel.id == announcement.id).first()
        if model is None:
            msg = f"Announcement with id {announcement.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, announcement, include_creation_fields=False)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def archive(self, announcement_id: str, archived_at: datetime | None = None) -> None:
        """Stamp ``archived_at`` unless the announcement is already archived."""

        stamp = to_storage_datetime(archived_at or now_in_app_timezone())
        self._visible().filter(
            AnnouncementModel.id == announcement_id,
            AnnouncementModel.archived_at.is_(None),
        ).update(
            {AnnouncementModel.archived_at: stamp, AnnouncementModel.updated_at: stamp},
            synchronize_session=False,
        )
        self.session.commit()

    def delete(self, announcement_id: str, deleted_at: datetime | None = None) -> None:
        """Soft delete the announcement; rows already deleted are left untouched."""

        stamp = to_storage_datetime(deleted_at or now_in_app_timezone())
        self._visible().filter(AnnouncementModel.id == announcement_id).update(
            {AnnouncementModel.deleted_at: stamp, AnnouncementModel.updated_at: stamp},
            synchronize_session=False,
        )
        self.session.commit()

    def list_active(self) -> Sequence[Announcement]:
        query = (
            self._visible()
            .filter(AnnouncementModel.archived_at.is_(None))
            .order_by(
                AnnouncementModel.priority.desc(),
                AnnouncementModel.published_at.desc(),
            )
        )
        return [self._to_entity(model) for model in query.all()]

    def list_archived(self) -> Sequence[Announcement]:
        query = (
            self._visible()
            .filter(AnnouncementModel.archived_at.is_not(None))
            .order_by(AnnouncementModel.archived_at.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def _visible(self) -> Query:
        return self.session.query(AnnouncementModel).filter(
            AnnouncementModel.deleted_at.is_(None)
        )

    @staticmethod
    def _apply_entity_to_model(
        model: AnnouncementModel,
        announcement: Announcement,
        *,
        include_creation_fields: bool,
    ) -> None:
        if include_creation_fields:
            model.id = announcement.id
            model.author_id = announcement.author_id
            model.published_at = to_storage_datetime(announcement.published_at)
            model.created_at = to_storage_datetime(announcement.created_at)
        model.title = announcement.title
        model.content = announcement.content
        model.priority = announcement.priority.value
        model.archived_at = to_storage_datetime(announcement.archived_at)
        model.deleted_at = to_storage_datetime(announcement.deleted_at)
        model.updated_at = to_storage_datetime(announcement.updated_at)

    @staticmethod
    def _to_entity(model: AnnouncementModel) -> Announcement:
        return Announcement(
            id=model.id,
            title=model.title,
            content=model.content,
            priority=model.priority,
            author_id=model.author_id,
            published_at=from_storage_datetime(model.published_at),
            created_at=from_storage_datetime(model.created_at),
            updated_at=from_storage_datetime(model.updated_at),
            archived_at=from_storage_datetime(model.archived_at),
            deleted_at=from_storage_datetime(model.deleted_at),
        )


__all__ = ["AnnouncementRepository"]
