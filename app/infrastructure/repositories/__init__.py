"""Repository implementations for infrastructure layer."""

from .announcement_repository import AnnouncementRepository
from .member_repository import MemberDirectory, MemberRepository

__all__ = [
    "AnnouncementRepository",
    "MemberDirectory",
    "MemberRepository",
]
