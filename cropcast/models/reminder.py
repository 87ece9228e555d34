import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, String, Text, Uuid

from cropcast.database import Base
from cropcast.models.base import utcnow


class SeasonalReminder(Base):
    """A dated to-do owned by one user."""

    __tablename__ = "seasonal_reminders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    reminder_date = Column(Date, nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
