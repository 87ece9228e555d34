"""The two AI-backed handlers: crop recommendation and CropCast chat.

Errors leave these routes as ``{"error": message}`` bodies.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from cropcast.auth import bearer_token, resolve_user
from cropcast.config import get_settings
from cropcast.database import get_db
from cropcast.models import User
from cropcast.rate_limit import limiter
from cropcast.schemas.functions import ChatReply, ChatRequest, ErrorResponse, RecommendationRequest
from cropcast.services.chat_service import answer_question
from cropcast.services.errors import AuthenticationError
from cropcast.services.generator import GeneratorClient, get_generator
from cropcast.services.recommendation_service import generate_recommendations
from cropcast.services.weather import WeatherClient, get_weather_client

router = APIRouter(prefix="/functions/v1", tags=["functions"])
settings = get_settings()

ERROR_RESPONSES = {
    code: {"model": ErrorResponse} for code in (400, 401, 404, 429, 502, 503)
}


def get_function_user(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    token = bearer_token(authorization)
    if not token:
        raise AuthenticationError("No authorization header")
    user = resolve_user(db, token)
    if not user:
        raise AuthenticationError("User not authenticated")
    return user


@router.post("/crop-recommendation", responses=ERROR_RESPONSES)
@limiter.limit(settings.function_rate_limit)
async def crop_recommendation(
    request: Request,
    data: RecommendationRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_function_user),
    generator: GeneratorClient = Depends(get_generator),
    weather: WeatherClient = Depends(get_weather_client),
):
    """Generate, persist and return up to five ranked crops for a field."""
    saved = await generate_recommendations(db, user, data, generator, weather)
    return {"recommendations": [rec.model_dump() for rec in saved]}


@router.post("/cropcast-chat", response_model=ChatReply, responses=ERROR_RESPONSES)
@limiter.limit(settings.function_rate_limit)
async def cropcast_chat(
    request: Request,
    data: ChatRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_function_user),
    generator: GeneratorClient = Depends(get_generator),
):
    reply = await answer_question(db, user, data.message, generator)
    return {"response": reply}
