"""FastAPI dependency utilities."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.application.use_cases.announcements import AnnouncementLifecycleService
from app.application.use_cases.notifications import NotificationDispatcher, RecipientSelector
from app.config import Settings
from app.domain.ports import EmailGateway
from app.infrastructure.database import SessionLocal, get_db
from app.infrastructure.email import SendGridEmailGateway
from app.infrastructure.repositories import (
    AnnouncementRepository,
    MemberDirectory,
    MemberRepository,
)
from app.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def build_notification_dispatcher(
    settings: Settings,
    *,
    session_factory: Callable[[], Session] = SessionLocal,
    gateway: EmailGateway | None = None,
) -> NotificationDispatcher:
    """Wire the dispatcher shared by every request of the application."""

    selector = RecipientSelector(MemberDirectory(session_factory))
    return NotificationDispatcher.from_settings(
        settings, selector, gateway or SendGridEmailGateway(settings)
    )


def get_current_member_id(token: str = Depends(oauth2_scheme)) -> str:
    """Return the member id carried by the bearer token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    member_id = payload.get("sub")
    if not isinstance(member_id, str) or not member_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return member_id


def get_notification_dispatcher(request: Request) -> NotificationDispatcher:
    """Return the dispatcher created by the application lifespan."""

    return request.app.state.notification_dispatcher


def get_announcement_service(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> AnnouncementLifecycleService:
    """Return a lifecycle service bound to the request session."""

    return AnnouncementLifecycleService(
        AnnouncementRepository(db), MemberRepository(db), dispatcher
    )
