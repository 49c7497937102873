"""Routes for publishing and managing announcements."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.application.use_cases.announcements import AnnouncementLifecycleService
from app.domain.entities import Announcement
from app.domain.exceptions import (
    AnnouncementError,
    AuthorizationError,
    NotFoundError,
    StateError,
)
from app.interfaces.api.dependencies import get_announcement_service, get_current_member_id
from app.interfaces.api.schemas import AnnouncementCreate, AnnouncementRead, AnnouncementUpdate

router = APIRouter(prefix="/announcements", tags=["announcements"])


def _to_read_model(announcement: Announcement) -> AnnouncementRead:
    return AnnouncementRead.model_validate(announcement)


def _to_http_error(exc: AnnouncementError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, AuthorizationError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, StateError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))


@router.post("/", response_model=AnnouncementRead, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    payload: AnnouncementCreate,
    member_id: str = Depends(get_current_member_id),
    service: AnnouncementLifecycleService = Depends(get_announcement_service),
) -> AnnouncementRead:
    """Publish an announcement; URGENT ones are emailed to opted-in members."""

    try:
        announcement = await service.create_announcement(
            member_id, payload.title, payload.content, payload.priority
        )
    except AnnouncementError as exc:
        raise _to_http_error(exc) from exc
    return _to_read_model(announcement)


@router.get("/", response_model=list[AnnouncementRead])
async def list_announcements(
    archived: bool = Query(False, description="Return only archived announcements"),
    member_id: str = Depends(get_current_member_id),
    service: AnnouncementLifecycleService = Depends(get_announcement_service),
) -> list[AnnouncementRead]:
    """Return active announcements, urgent ones first."""

    announcements = await service.list_announcements(archived=archived)
    return [_to_read_model(announcement) for announcement in announcements]


@router.get("/{announcement_id}", response_model=AnnouncementRead)
async def read_announcement(
    announcement_id: str,
    member_id: str = Depends(get_current_member_id),
    service: AnnouncementLifecycleService = Depends(get_announcement_service),
) -> AnnouncementRead:
    try:
        announcement = await service.get_announcement(announcement_id)
    except AnnouncementError as exc:
        raise _to_http_error(exc) from exc
    return _to_read_model(announcement)


@router.patch("/{announcement_id}", response_model=AnnouncementRead)
async def update_announcement(
    announcement_id: str,
    payload: AnnouncementUpdate,
    member_id: str = Depends(get_current_member_id),
    service: AnnouncementLifecycleService = Depends(get_announcement_service),
) -> AnnouncementRead:
    try:
        announcement = await service.update_announcement(
            announcement_id,
            member_id,
            title=payload.title,
            content=payload.content,
            priority=payload.priority,
        )
    except AnnouncementError as exc:
        raise _to_http_error(exc) from exc
    return _to_read_model(announcement)


@router.post("/{announcement_id}/archive", status_code=status.HTTP_204_NO_CONTENT)
async def archive_announcement(
    announcement_id: str,
    member_id: str = Depends(get_current_member_id),
    service: AnnouncementLifecycleService = Depends(get_announcement_service),
) -> Response:
    try:
        await service.archive_announcement(announcement_id, member_id)
    except AnnouncementError as exc:
        raise _to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{announcement_id}/unarchive", status_code=status.HTTP_204_NO_CONTENT)
async def unarchive_announcement(
    announcement_id: str,
    member_id: str = Depends(get_current_member_id),
    service: AnnouncementLifecycleService = Depends(get_announcement_service),
) -> Response:
    try:
        await service.unarchive_announcement(announcement_id, member_id)
    except AnnouncementError as exc:
        raise _to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_announcement(
    announcement_id: str,
    member_id: str = Depends(get_current_member_id),
    service: AnnouncementLifecycleService = Depends(get_announcement_service),
) -> Response:
    try:
        await service.delete_announcement(announcement_id, member_id)
    except AnnouncementError as exc:
        raise _to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
