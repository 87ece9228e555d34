"""Field API endpoints."""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cropcast.auth import get_current_user
from cropcast.database import get_db
from cropcast.models import CropRecommendation, Field, User
from cropcast.routers.farms import get_owned_farm, normalize_text
from cropcast.schemas import CropRecommendationRecord, FieldCreate, FieldResponse, FieldUpdate
from cropcast.services.ownership import find_owned_field

router = APIRouter(tags=["fields"])


def clean_crop_names(names: List[str]) -> List[str]:
    """Strip names and drop blanks; order and repeats are kept."""
    return [name.strip() for name in names if name and name.strip()]


def get_owned_field(db: Session, user: User, field_id: UUID) -> Field:
    field = find_owned_field(db, user, field_id)
    if not field:
        raise HTTPException(status_code=404, detail="Field not found")
    return field


@router.get("/farms/{farm_id}/fields", response_model=List[FieldResponse])
def list_fields(
    farm_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    farm = get_owned_farm(db, current_user, farm_id)
    return db.query(Field).filter(Field.farm_id == farm.id).order_by(Field.created_at.desc()).all()


@router.post("/farms/{farm_id}/fields", response_model=FieldResponse, status_code=201)
def create_field(
    farm_id: UUID,
    data: FieldCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    farm = get_owned_farm(db, current_user, farm_id)
    field_name = normalize_text(data.field_name)
    if not field_name:
        raise HTTPException(status_code=400, detail="field_name must not be empty")

    field = Field(
        farm_id=farm.id,
        field_name=field_name,
        soil_type=data.soil_type,
        field_location=normalize_text(data.field_location) or "",
        area_size=data.area_size,
        previous_crops=clean_crop_names(data.previous_crops),
    )
    db.add(field)
    db.commit()
    db.refresh(field)
    return field


@router.put("/fields/{field_id}", response_model=FieldResponse)
def update_field(
    field_id: UUID,
    data: FieldUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    field = get_owned_field(db, current_user, field_id)
    changes = data.model_dump(exclude_unset=True)

    if "field_name" in changes:
        field_name = normalize_text(changes["field_name"])
        if not field_name:
            raise HTTPException(status_code=400, detail="field_name must not be empty")
        field.field_name = field_name
    if changes.get("soil_type") is not None:
        field.soil_type = changes["soil_type"]
    if "field_location" in changes:
        field.field_location = normalize_text(changes["field_location"]) or ""
    if changes.get("area_size") is not None:
        field.area_size = changes["area_size"]
    if changes.get("previous_crops") is not None:
        field.previous_crops = clean_crop_names(changes["previous_crops"])

    db.commit()
    db.refresh(field)
    return field


@router.delete("/fields/{field_id}", status_code=204)
def delete_field(
    field_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    field = get_owned_field(db, current_user, field_id)
    db.delete(field)
    db.commit()
    return None


@router.get("/fields/{field_id}/recommendations", response_model=List[CropRecommendationRecord])
def list_field_recommendations(
    field_id: UUID,
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Previously generated recommendations for a field, newest first."""
    field = get_owned_field(db, current_user, field_id)
    return (
        db.query(CropRecommendation)
        .filter(CropRecommendation.field_id == field.id)
        .order_by(CropRecommendation.created_at.desc())
        .limit(limit)
        .all()
    )
