"""Client for the Gemini ``generateContent`` REST API."""
import logging
from typing import Any, Optional

import httpx

from cropcast.config import get_settings
from cropcast.services.errors import GeneratorConfigError, GeneratorUpstreamError

logger = logging.getLogger(__name__)


def extract_text(payload: Any) -> Optional[str]:
    """Return ``candidates[0].content.parts[0].text`` or None."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) and text else None


class GeneratorClient:
    """Sends one prompt per call; no retries."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-pro",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def generate(self, prompt: str) -> Optional[str]:
        """Return the first candidate's text, or None when the reply carries none."""
        if not self.configured:
            raise GeneratorConfigError("Google AI API key not configured")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        body = {"contents": [{"parts": [{"text": prompt}]}]}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(url, params={"key": self.api_key}, json=body)
            except httpx.HTTPError as exc:
                logger.error("Generator request failed: %s", exc)
                raise GeneratorUpstreamError(f"Google AI API error: {exc}") from exc

        if response.is_error:
            logger.error("Generator returned HTTP %s", response.status_code)
            raise GeneratorUpstreamError(f"Google AI API error: {response.reason_phrase}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise GeneratorUpstreamError("Google AI API error: malformed response body") from exc
        return extract_text(payload)


def get_generator() -> GeneratorClient:
    settings = get_settings()
    return GeneratorClient(
        api_key=settings.google_ai_api_key,
        model=settings.generator_model,
        base_url=settings.generator_base_url,
        timeout=settings.http_timeout_seconds,
    )
