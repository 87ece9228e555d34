"""Pydantic schemas for API request/response validation.

The client package parses responses with the same classes.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from cropcast.models.farm import CropStage, SoilType


# === Auth Schemas ===
class SignupRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    id: UUID
    email: str
    display_name: str
    is_active: bool = True

    model_config = {"from_attributes": True}


# === Profile Schemas ===
class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None


class ProfileResponse(BaseModel):
    id: UUID
    full_name: Optional[str] = None
    phone: Optional[str] = None

    model_config = {"from_attributes": True}


# === Farm Schemas ===
class FarmBase(BaseModel):
    name: str
    location: str = ""
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    area_size: float = Field(default=0, ge=0)
    soil_type: str = ""


class FarmCreate(FarmBase):
    """Schema for creating a farm."""
    pass


class FarmUpdate(BaseModel):
    """Schema for updating a farm; omitted keys are left untouched."""
    name: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    area_size: Optional[float] = Field(default=None, ge=0)
    soil_type: Optional[str] = None


class FarmResponse(FarmBase):
    id: UUID
    user_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


# === Field Schemas ===
class FieldBase(BaseModel):
    field_name: str
    soil_type: SoilType
    field_location: str = ""
    area_size: float = Field(default=0, ge=0)
    previous_crops: list[str] = []


class FieldCreate(FieldBase):
    """Schema for creating a field."""
    pass


class FieldUpdate(BaseModel):
    field_name: Optional[str] = None
    soil_type: Optional[SoilType] = None
    field_location: Optional[str] = None
    area_size: Optional[float] = Field(default=None, ge=0)
    previous_crops: Optional[list[str]] = None


class FieldResponse(FieldBase):
    id: UUID
    farm_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


# === Crop Schemas ===
class CropBase(BaseModel):
    crop_type: str
    variety: str = ""
    current_stage: CropStage = CropStage.PLANNING
    planting_date: Optional[date] = None
    expected_harvest_date: Optional[date] = None


class CropCreate(CropBase):
    """Schema for creating a crop."""
    pass


class CropUpdate(BaseModel):
    crop_type: Optional[str] = None
    variety: Optional[str] = None
    current_stage: Optional[CropStage] = None
    planting_date: Optional[date] = None
    expected_harvest_date: Optional[date] = None


class CropResponse(CropBase):
    id: UUID
    farm_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


# === Reminder Schemas ===
class ReminderCreate(BaseModel):
    title: str
    description: str = ""
    reminder_date: date


class ReminderUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    reminder_date: Optional[date] = None
    is_completed: Optional[bool] = None


class ReminderResponse(ReminderCreate):
    id: UUID
    user_id: UUID
    is_completed: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# === Chat / Recommendation history ===
class ChatMessageResponse(BaseModel):
    id: UUID
    message: str
    response: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CropRecommendationRecord(BaseModel):
    id: UUID
    field_id: UUID
    crop_type: str
    suitability_percentage: int
    recommendation_factors: dict
    weather_data: dict
    created_at: datetime

    model_config = {"from_attributes": True}


class RecommendationResponse(BaseModel):
    """Legacy advice row shown on the dashboard."""
    id: UUID
    crop_type: str
    recommendation_text: str
    confidence_score: float
    created_at: datetime

    model_config = {"from_attributes": True}


# === Weather / Dashboard ===
class WeatherSnapshot(BaseModel):
    location: str
    temperature: float
    condition: str
    humidity: int
    wind_speed: float


class DashboardResponse(BaseModel):
    display_name: str
    farm: Optional[FarmResponse] = None
    crops: list[CropResponse] = []
    weather: Optional[WeatherSnapshot] = None
    recommendations: list[RecommendationResponse] = []
