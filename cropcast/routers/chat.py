"""Chat history endpoint."""
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cropcast.auth import get_current_user
from cropcast.database import get_db
from cropcast.models import ChatMessage, User
from cropcast.schemas import ChatMessageResponse

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/messages", response_model=List[ChatMessageResponse])
def list_messages(
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """The most recent ``limit`` exchanges, oldest first."""
    rows = (
        db.query(ChatMessage)
        .filter(ChatMessage.user_id == current_user.id)
        .order_by(ChatMessage.created_at.desc())
        .limit(limit)
        .all()
    )
    rows.reverse()
    return rows
