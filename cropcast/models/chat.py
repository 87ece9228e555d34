import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Text, Uuid

from cropcast.database import Base
from cropcast.models.base import utcnow


class ChatMessage(Base):
    """One question/answer pair; rendered as two transcript entries."""

    __tablename__ = "chat_messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    response = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
