"""ORM models used by the application infrastructure."""

from .member import MemberModel
from .announcement import AnnouncementModel

__all__ = [
    "AnnouncementModel",
    "MemberModel",
]
