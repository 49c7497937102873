"""SQLAlchemy model for the announcement table."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from app.infrastructure.database import Base


class AnnouncementModel(Base):
    """Database representation of an announcement."""

    __tablename__ = "announcement"

    id = Column(String(36), primary_key=True)
    title = Column(String(150), nullable=False)
    content = Column(Text, nullable=False)
    priority = Column(String(10), nullable=False, default="NORMAL", index=True)
    author_id = Column(String(36), ForeignKey("member.id"), nullable=False, index=True)
    published_at = Column(DateTime, nullable=False, index=True)
    archived_at = Column(DateTime, nullable=True)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
