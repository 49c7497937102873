"""Read access to member data."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Member, MemberRole
from app.infrastructure.models import MemberModel
from app.utils import from_storage_datetime, to_storage_datetime

logger = logging.getLogger(__name__)


def _parse_role(model: MemberModel) -> MemberRole:
    """Return the stored role; unknown values get no management rights."""

    try:
        return MemberRole(model.role)
    except ValueError:
        logger.warning("Member %s has unknown role %r; treating as MEMBER", model.id, model.role)
        return MemberRole.MEMBER


class MemberRepository:
    """Provide lookups over the member table bound to one session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_id(self, member_id: str) -> Member | None:
        model = (
            self.session.query(MemberModel)
            .filter(MemberModel.id == member_id)
            .filter(MemberModel.deleted_at.is_(None))
            .first()
        )
        return self._to_entity(model) if model else None

    def find_all(self) -> Sequence[Member]:
        query = self.session.query(MemberModel).filter(MemberModel.deleted_at.is_(None))
        return [self._to_entity(model) for model in query.all()]

    def create(self, member: Member) -> Member:
        model = MemberModel(
            id=member.id,
            email=member.email,
            first_name=member.first_name,
            last_name=member.last_name,
            role=member.role.value,
            email_notifications=member.email_notifications,
            deleted_at=to_storage_datetime(member.deleted_at),
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: MemberModel) -> Member:
        return Member(
            id=model.id,
            email=model.email or "",
            first_name=model.first_name,
            last_name=model.last_name,
            role=_parse_role(model),
            email_notifications=model.email_notifications is not False,
            deleted_at=from_storage_datetime(model.deleted_at),
        )


class MemberDirectory:
    """Member lookup that opens a short-lived session for every call.

    The notification dispatcher outlives the request that triggered it, so it
    cannot borrow the request session.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def find_by_id(self, member_id: str) -> Member | None:
        with self._session_factory() as session:
            return MemberRepository(session).find_by_id(member_id)

    def find_all(self) -> Sequence[Member]:
        with self._session_factory() as session:
            return MemberRepository(session).find_all()


__all__ = ["MemberDirectory", "MemberRepository"]
