from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cropcast.auth import get_current_user
from cropcast.database import get_db
from cropcast.models import Profile, User
from cropcast.routers.farms import normalize_text
from cropcast.schemas import ProfileResponse, ProfileUpdate

router = APIRouter(prefix="/profile", tags=["profile"])


def ensure_profile(db: Session, user: User) -> Profile:
    if user.profile is None:
        user.profile = Profile()
        db.commit()
        db.refresh(user)
    return user.profile


@router.get("", response_model=ProfileResponse)
def get_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ensure_profile(db, current_user)


@router.put("", response_model=ProfileResponse)
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = ensure_profile(db, current_user)
    changes = data.model_dump(exclude_unset=True)
    for key, value in changes.items():
        setattr(profile, key, normalize_text(value) or None)
    db.commit()
    db.refresh(profile)
    return profile
