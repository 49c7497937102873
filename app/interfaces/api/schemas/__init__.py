from .announcement import AnnouncementCreate, AnnouncementRead, AnnouncementUpdate

__all__ = [
    "AnnouncementCreate",
    "AnnouncementRead",
    "AnnouncementUpdate",
]
