"""Farm API endpoints, scoped to the caller."""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cropcast.auth import get_current_user
from cropcast.database import get_db
from cropcast.models import Farm, User
from cropcast.schemas import FarmCreate, FarmResponse, FarmUpdate

router = APIRouter(prefix="/farms", tags=["farms"])


def normalize_text(value: Optional[str]) -> Optional[str]:
    """Trim incoming string data and return None for None values."""
    if value is None:
        return None
    return value.strip()


def get_owned_farm(db: Session, user: User, farm_id: UUID) -> Farm:
    farm = db.query(Farm).filter(Farm.id == farm_id, Farm.user_id == user.id).first()
    if not farm:
        raise HTTPException(status_code=404, detail="Farm not found")
    return farm


@router.get("", response_model=List[FarmResponse])
def list_farms(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List the caller's farms, most recently created first."""
    return (
        db.query(Farm)
        .filter(Farm.user_id == current_user.id)
        .order_by(Farm.created_at.desc())
        .all()
    )


@router.post("", response_model=FarmResponse, status_code=201)
def create_farm(
    data: FarmCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    name = normalize_text(data.name)
    if not name:
        raise HTTPException(status_code=400, detail="name must not be empty")

    farm = Farm(
        user_id=current_user.id,
        name=name,
        location=normalize_text(data.location) or "",
        latitude=data.latitude,
        longitude=data.longitude,
        area_size=data.area_size,
        soil_type=normalize_text(data.soil_type) or "",
    )
    db.add(farm)
    db.commit()
    db.refresh(farm)
    return farm


@router.get("/{farm_id}", response_model=FarmResponse)
def get_farm(
    farm_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_owned_farm(db, current_user, farm_id)


@router.put("/{farm_id}", response_model=FarmResponse)
def update_farm(
    farm_id: UUID,
    data: FarmUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    farm = get_owned_farm(db, current_user, farm_id)
    changes = data.model_dump(exclude_unset=True)

    if "name" in changes:
        name = normalize_text(changes["name"])
        if not name:
            raise HTTPException(status_code=400, detail="name must not be empty")
        changes["name"] = name
    for key in ("location", "soil_type"):
        if key in changes:
            changes[key] = normalize_text(changes[key]) or ""
    if changes.get("area_size") is None:
        changes.pop("area_size", None)

    for key, value in changes.items():
        setattr(farm, key, value)
    db.commit()
    db.refresh(farm)
    return farm


@router.delete("/{farm_id}", status_code=204)
def delete_farm(
    farm_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a farm together with its fields and crops."""
    farm = get_owned_farm(db, current_user, farm_id)
    try:
        db.delete(farm)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return None
