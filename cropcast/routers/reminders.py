"""Seasonal reminder endpoints."""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cropcast.auth import get_current_user
from cropcast.database import get_db
from cropcast.models import SeasonalReminder, User
from cropcast.routers.farms import normalize_text
from cropcast.schemas import ReminderCreate, ReminderResponse, ReminderUpdate

router = APIRouter(prefix="/reminders", tags=["reminders"])


def get_owned_reminder(db: Session, user: User, reminder_id: UUID) -> SeasonalReminder:
    reminder = (
        db.query(SeasonalReminder)
        .filter(SeasonalReminder.id == reminder_id, SeasonalReminder.user_id == user.id)
        .first()
    )
    if not reminder:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return reminder


@router.get("", response_model=List[ReminderResponse])
def list_reminders(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List reminders, soonest first."""
    return (
        db.query(SeasonalReminder)
        .filter(SeasonalReminder.user_id == current_user.id)
        .order_by(SeasonalReminder.reminder_date.asc(), SeasonalReminder.created_at.asc())
        .all()
    )


@router.post("", response_model=ReminderResponse, status_code=201)
def create_reminder(
    data: ReminderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    title = normalize_text(data.title)
    if not title:
        raise HTTPException(status_code=400, detail="title must not be empty")

    reminder = SeasonalReminder(
        user_id=current_user.id,
        title=title,
        description=normalize_text(data.description) or "",
        reminder_date=data.reminder_date,
        is_completed=False,
    )
    db.add(reminder)
    db.commit()
    db.refresh(reminder)
    return reminder


@router.put("/{reminder_id}", response_model=ReminderResponse)
def update_reminder(
    reminder_id: UUID,
    data: ReminderUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    reminder = get_owned_reminder(db, current_user, reminder_id)
    changes = data.model_dump(exclude_unset=True)

    if "title" in changes:
        title = normalize_text(changes["title"])
        if not title:
            raise HTTPException(status_code=400, detail="title must not be empty")
        reminder.title = title
    if "description" in changes:
        reminder.description = normalize_text(changes["description"]) or ""
    if changes.get("reminder_date") is not None:
        reminder.reminder_date = changes["reminder_date"]
    if changes.get("is_completed") is not None:
        reminder.is_completed = changes["is_completed"]

    db.commit()
    db.refresh(reminder)
    return reminder


@router.delete("/{reminder_id}", status_code=204)
def delete_reminder(
    reminder_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    reminder = get_owned_reminder(db, current_user, reminder_id)
    db.delete(reminder)
    db.commit()
    return None
