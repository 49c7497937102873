"""SQLAlchemy model for the member table."""

from sqlalchemy import Boolean, Column, DateTime, String, func

from app.infrastructure.database import Base


class MemberModel(Base):
    """Database representation of a congregation member."""

    __tablename__ = "member"

    id = Column(String(36), primary_key=True)
    email = Column(String(254), nullable=False, unique=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(String(10), nullable=False, default="MEMBER")
    # Unset preferences predate the column and count as opted in.
    email_notifications = Column(Boolean, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    deleted_at = Column(DateTime, nullable=True)
