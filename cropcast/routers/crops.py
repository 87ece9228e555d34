"""Farm-scoped crop log endpoints."""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cropcast.auth import get_current_user
from cropcast.database import get_db
from cropcast.models import Crop, Farm, User
from cropcast.routers.farms import get_owned_farm, normalize_text
from cropcast.schemas import CropCreate, CropResponse, CropUpdate

router = APIRouter(tags=["crops"])


def get_owned_crop(db: Session, user: User, crop_id: UUID) -> Crop:
    crop = (
        db.query(Crop)
        .join(Farm, Crop.farm_id == Farm.id)
        .filter(Crop.id == crop_id, Farm.user_id == user.id)
        .first()
    )
    if not crop:
        raise HTTPException(status_code=404, detail="Crop not found")
    return crop


def check_dates(crop: Crop) -> None:
    if crop.planting_date and crop.expected_harvest_date and crop.expected_harvest_date < crop.planting_date:
        raise HTTPException(status_code=400, detail="expected_harvest_date must not precede planting_date")


@router.get("/farms/{farm_id}/crops", response_model=List[CropResponse])
def list_crops(
    farm_id: UUID,
    limit: Optional[int] = Query(default=None, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    farm = get_owned_farm(db, current_user, farm_id)
    query = db.query(Crop).filter(Crop.farm_id == farm.id).order_by(Crop.created_at.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


@router.post("/farms/{farm_id}/crops", response_model=CropResponse, status_code=201)
def create_crop(
    farm_id: UUID,
    data: CropCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    farm = get_owned_farm(db, current_user, farm_id)
    crop_type = normalize_text(data.crop_type)
    if not crop_type:
        raise HTTPException(status_code=400, detail="crop_type must not be empty")

    crop = Crop(
        farm_id=farm.id,
        crop_type=crop_type,
        variety=normalize_text(data.variety) or "",
        current_stage=data.current_stage,
        planting_date=data.planting_date,
        expected_harvest_date=data.expected_harvest_date,
    )
    check_dates(crop)
    db.add(crop)
    db.commit()
    db.refresh(crop)
    return crop


@router.put("/crops/{crop_id}", response_model=CropResponse)
def update_crop(
    crop_id: UUID,
    data: CropUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    crop = get_owned_crop(db, current_user, crop_id)
    changes = data.model_dump(exclude_unset=True)

    if "crop_type" in changes:
        crop_type = normalize_text(changes["crop_type"])
        if not crop_type:
            raise HTTPException(status_code=400, detail="crop_type must not be empty")
        crop.crop_type = crop_type
    if "variety" in changes:
        crop.variety = normalize_text(changes["variety"]) or ""
    if changes.get("current_stage") is not None:
        crop.current_stage = changes["current_stage"]
    if "planting_date" in changes:
        crop.planting_date = changes["planting_date"]
    if "expected_harvest_date" in changes:
        crop.expected_harvest_date = changes["expected_harvest_date"]

    check_dates(crop)
    db.commit()
    db.refresh(crop)
    return crop


@router.delete("/crops/{crop_id}", status_code=204)
def delete_crop(
    crop_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    crop = get_owned_crop(db, current_user, crop_id)
    db.delete(crop)
    db.commit()
    return None
