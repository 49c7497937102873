"""Domain entities exposed by the application."""

from .announcement import Announcement, Priority
from .member import Member, MemberRole
from .email_message import EmailMessage

__all__ = [
    "Announcement",
    "EmailMessage",
    "Member",
    "MemberRole",
    "Priority",
]
