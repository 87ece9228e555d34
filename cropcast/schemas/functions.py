"""Wire schemas of the two handler endpoints (camelCase on the wire)."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RecommendationRequest(BaseModel):
    """Body of ``POST /functions/v1/crop-recommendation``.

    Every key is optional at the schema level so that a missing ``fieldId``
    or ``soilType`` is reported by the handler as ``{"error": ...}``
    instead of FastAPI's validation payload.
    """

    model_config = ConfigDict(populate_by_name=True)

    field_id: Optional[str] = Field(default=None, alias="fieldId")
    soil_type: Optional[str] = Field(default=None, alias="soilType")
    location: Optional[str] = None
    previous_crops: Optional[list[str]] = Field(default=None, alias="previousCrops")


class RecommendationFactors(BaseModel):
    soil: str
    climate: str
    rotation: str
    water: str


class GeneratedRecommendation(BaseModel):
    crop: str
    suitability: int = Field(ge=0, le=100)
    factors: RecommendationFactors

    @field_validator("suitability", mode="before")
    @classmethod
    def round_fractional_scores(cls, value: Any):
        if isinstance(value, float):
            return round(value)
        return value

    @field_validator("crop")
    @classmethod
    def crop_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("crop must not be empty")
        return value


class RecommendationsPayload(BaseModel):
    recommendations: list[GeneratedRecommendation]


class ChatRequest(BaseModel):
    message: Optional[str] = None


class ChatReply(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    error: str
