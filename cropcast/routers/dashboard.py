"""Home screen data and the weather snapshot."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cropcast.auth import get_current_user
from cropcast.database import get_db
from cropcast.models import Crop, Recommendation, User
from cropcast.routers.farms import get_owned_farm
from cropcast.schemas import DashboardResponse, WeatherSnapshot
from cropcast.services.weather import synthetic_snapshot

router = APIRouter(tags=["dashboard"])


@router.get("/weather", response_model=WeatherSnapshot)
def get_weather(
    location: str = Query(min_length=1),
    _current_user: User = Depends(get_current_user),
):
    return synthetic_snapshot(location.strip())


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    farm_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = current_user.profile
    result = {
        "display_name": (profile.full_name if profile else None) or "Farmer",
        "recommendations": (
            db.query(Recommendation)
            .filter(Recommendation.user_id == current_user.id)
            .order_by(Recommendation.created_at.desc())
            .limit(2)
            .all()
        ),
    }

    if farm_id is not None:
        farm = get_owned_farm(db, current_user, farm_id)
        result["farm"] = farm
        result["crops"] = (
            db.query(Crop)
            .filter(Crop.farm_id == farm.id)
            .order_by(Crop.created_at.desc())
            .limit(3)
            .all()
        )
        if farm.location:
            result["weather"] = synthetic_snapshot(farm.location)

    return result
