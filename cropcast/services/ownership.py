"""Lookups scoped to the calling user."""
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from cropcast.models import Farm, Field, User


def find_owned_field(db: Session, user: User, field_id: UUID) -> Optional[Field]:
    """The field with ``field_id`` if it sits on one of ``user``'s farms."""
    return (
        db.query(Field)
        .join(Farm, Field.farm_id == Farm.id)
        .filter(Field.id == field_id, Farm.user_id == user.id)
        .first()
    )
