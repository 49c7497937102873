"""Use cases for managing announcements."""

from .lifecycle import AnnouncementLifecycleService
from .validators import ensure_valid_identifier

__all__ = [
    "AnnouncementLifecycleService",
    "ensure_valid_identifier",
]
