"""Conversational assistant: one generator call per question, persisted as a pair."""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cropcast.models import ChatMessage, User
from cropcast.services.errors import InvalidRequestError
from cropcast.services.generator import GeneratorClient

logger = logging.getLogger(__name__)

NO_REPLY = "I'm sorry, I couldn't generate a response."

SYSTEM_PROMPT = """You are CropCast, an AI assistant specialized in agricultural advice and crop management.
You help farmers with:
- Crop selection and planting recommendations
- Pest and disease identification and treatment
- Irrigation and water management
- Fertilizer and soil management
- Weather-related farming advice
- Harvest timing and techniques
- Sustainable farming practices

Provide practical, actionable advice in a friendly and professional manner. If you're unsure about something, recommend consulting with local agricultural experts."""


def build_prompt(message: str) -> str:
    return f"{SYSTEM_PROMPT}\n\nUser: {message}"


def save_exchange(db: Session, user: User, message: str, response: str) -> bool:
    try:
        db.add(ChatMessage(user_id=user.id, message=message, response=response))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error saving chat message: %s", exc)
        return False
    return True


async def answer_question(db: Session, user: User, message: str | None, generator: GeneratorClient) -> str:
    if not message or not message.strip():
        raise InvalidRequestError("Message is required")

    reply = await generator.generate(build_prompt(message)) or NO_REPLY
    save_exchange(db, user, message, reply)
    return reply
