"""Aggregate application use cases."""

from .announcements import AnnouncementLifecycleService
from .notifications import NotificationDispatcher, RecipientSelector

__all__ = [
    "AnnouncementLifecycleService",
    "NotificationDispatcher",
    "RecipientSelector",
]
