"""
Crop recommendation workflow

Weather enrichment is best effort, the generator is called exactly once,
unparseable output is replaced by a fixed fallback list, and each
suggestion is persisted as its own row.
"""
import json
import logging
import re
from typing import Optional
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cropcast.models import CropRecommendation, Field, User
from cropcast.schemas.functions import (
    GeneratedRecommendation,
    RecommendationFactors,
    RecommendationRequest,
    RecommendationsPayload,
)
from cropcast.services.errors import FieldNotFoundError, InvalidRequestError
from cropcast.services.generator import GeneratorClient
from cropcast.services.ownership import find_owned_field
from cropcast.services.weather import MODERATE_CONDITIONS, WeatherClient

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 5

FALLBACK_RECOMMENDATIONS = [
    GeneratedRecommendation(
        crop="Wheat",
        suitability=85,
        factors=RecommendationFactors(
            soil="Good compatibility with most soil types",
            climate="Suitable for moderate climates",
            rotation="Excellent rotation crop",
            water="Moderate water requirements",
        ),
    ),
    GeneratedRecommendation(
        crop="Corn",
        suitability=80,
        factors=RecommendationFactors(
            soil="Thrives in well-drained soils",
            climate="Requires warm growing season",
            rotation="Good for nitrogen management",
            water="High water requirements",
        ),
    ),
    GeneratedRecommendation(
        crop="Soybeans",
        suitability=78,
        factors=RecommendationFactors(
            soil="Improves soil nitrogen",
            climate="Warm season crop",
            rotation="Excellent nitrogen fixer",
            water="Moderate water needs",
        ),
    ),
]

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

PROMPT_TEMPLATE = """You are an agricultural expert. Based on the following field information, recommend the top 5 most suitable crops with their suitability percentages (0-100).

Field Information:
- Soil Type: {soil_type}
- Location: {location}
- Weather: {weather}
- {history}

Consider:
1. Soil compatibility
2. Climate suitability
3. Crop rotation benefits
4. Water requirements
5. Market demand

Provide your response in this exact JSON format:
{{
  "recommendations": [
    {{
      "crop": "Crop Name",
      "suitability": 95,
      "factors": {{
        "soil": "Brief soil compatibility reason",
        "climate": "Brief climate suitability reason",
        "rotation": "Brief crop rotation benefit",
        "water": "Water requirement level"
      }}
    }}
  ]
}}

Only respond with valid JSON, no other text."""


def fallback_recommendations() -> list[GeneratedRecommendation]:
    return [rec.model_copy(deep=True) for rec in FALLBACK_RECOMMENDATIONS]


def build_prompt(
    soil_type: str,
    location: Optional[str],
    weather_description: str,
    previous_crops: list[str],
) -> str:
    if previous_crops:
        history = f"Previous crops grown: {', '.join(previous_crops)}"
    else:
        history = "No previous crop history available"
    return PROMPT_TEMPLATE.format(
        soil_type=soil_type,
        location=location or "Not specified",
        weather=weather_description,
        history=history,
    )


def parse_recommendations(text: Optional[str]) -> list[GeneratedRecommendation]:
    """Parse generator output; any failure yields the fallback list.

    An empty ``recommendations`` array counts as a failure too.
    """
    match = _JSON_OBJECT.search(text or "")
    if not match:
        logger.warning("No JSON object found in generator response")
        return fallback_recommendations()

    try:
        payload = RecommendationsPayload.model_validate(json.loads(match.group(0)))
    except (ValueError, ValidationError) as exc:
        logger.warning("Failed to parse generator response: %s", exc)
        return fallback_recommendations()

    if not payload.recommendations:
        logger.warning("Generator returned no recommendations")
        return fallback_recommendations()
    return payload.recommendations[:MAX_RECOMMENDATIONS]


def validate_request(request: RecommendationRequest) -> tuple[UUID, str]:
    field_id = (request.field_id or "").strip()
    soil_type = (request.soil_type or "").strip()
    if not field_id or not soil_type:
        raise InvalidRequestError("Field ID and soil type are required")
    try:
        return UUID(field_id), soil_type
    except ValueError:
        raise InvalidRequestError("Field ID must be a valid UUID")


def get_owned_field(db: Session, user: User, field_id: UUID) -> Field:
    field = find_owned_field(db, user, field_id)
    if not field:
        raise FieldNotFoundError("Field not found")
    return field


def persist_recommendations(
    db: Session,
    user: User,
    field_id: UUID,
    recommendations: list[GeneratedRecommendation],
    weather_data: dict,
) -> list[GeneratedRecommendation]:
    """Insert one row per suggestion; return only those that were stored."""
    saved = []
    for rec in recommendations:
        row = CropRecommendation(
            field_id=field_id,
            user_id=user.id,
            crop_type=rec.crop,
            suitability_percentage=rec.suitability,
            recommendation_factors=rec.factors.model_dump(),
            weather_data=weather_data,
        )
        try:
            db.add(row)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("Dropping recommendation %r for field %s: %s", rec.crop, field_id, exc)
            continue
        saved.append(rec)
    return saved


async def generate_recommendations(
    db: Session,
    user: User,
    request: RecommendationRequest,
    generator: GeneratorClient,
    weather: WeatherClient,
) -> list[GeneratedRecommendation]:
    """Run one generation event for a field. Not idempotent."""
    field_id, soil_type = validate_request(request)
    get_owned_field(db, user, field_id)

    weather_data: dict = {}
    weather_description = MODERATE_CONDITIONS
    if request.location:
        reading = await weather.current(request.location)
        if reading is not None:
            weather_data = reading.raw
            weather_description = reading.describe()

    prompt = build_prompt(soil_type, request.location, weather_description, request.previous_crops or [])
    text = await generator.generate(prompt)
    recommendations = parse_recommendations(text)

    saved = persist_recommendations(db, user, field_id, recommendations, weather_data)
    logger.info(
        "Generated %d recommendations for field %s (%d persisted)",
        len(recommendations), field_id, len(saved),
    )
    return saved
