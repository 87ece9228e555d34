"""All SQLAlchemy models – re-exported for Alembic and app use."""

from cropcast.models.user import User, Profile
from cropcast.models.farm import Farm, Field, Crop, SoilType, CropStage
from cropcast.models.reminder import SeasonalReminder
from cropcast.models.chat import ChatMessage
from cropcast.models.recommendation import CropRecommendation, Recommendation

__all__ = [
    "User", "Profile",
    "Farm", "Field", "Crop", "SoilType", "CropStage",
    "SeasonalReminder",
    "ChatMessage",
    "CropRecommendation", "Recommendation",
]
