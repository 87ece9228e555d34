"""Client-side state for the CropCast app."""
from cropcast.client.api import ApiError, CropCastAPI
from cropcast.client.chat import ChatWorkflow, TranscriptEntry
from cropcast.client.farm_registry import FarmRegistry
from cropcast.client.loaders import ListLoader, crops_loader, fields_loader, reminders_loader
from cropcast.client.recommendations import RecommendationWorkflow
from cropcast.client.session import NotAuthenticatedError, Session, SessionStore

__all__ = [
    "ApiError", "CropCastAPI",
    "ChatWorkflow", "TranscriptEntry",
    "FarmRegistry",
    "ListLoader", "crops_loader", "fields_loader", "reminders_loader",
    "RecommendationWorkflow",
    "NotAuthenticatedError", "Session", "SessionStore",
]
