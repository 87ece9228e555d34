"""Generated crop recommendations and the legacy advice table."""
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from cropcast.database import Base
from cropcast.models.base import JSONType, utcnow


class CropRecommendation(Base):
    """One row per suggestion of one generation event. Never deduplicated."""

    __tablename__ = "crop_recommendations"
    __table_args__ = (
        CheckConstraint(
            "suitability_percentage >= 0 AND suitability_percentage <= 100",
            name="ck_crop_recommendations_suitability",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    field_id = Column(Uuid, ForeignKey("fields.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    crop_type = Column(String(100), nullable=False)
    suitability_percentage = Column(Integer, nullable=False)
    recommendation_factors = Column(JSONType, nullable=False, default=dict)
    weather_data = Column(JSONType, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    field = relationship("Field", back_populates="recommendations")


class Recommendation(Base):
    __tablename__ = "recommendations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    crop_type = Column(String(100), nullable=False)
    recommendation_text = Column(Text, nullable=False)
    confidence_score = Column(Float, nullable=False, default=0)  # 0..1
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
