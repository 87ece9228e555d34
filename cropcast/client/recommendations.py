"""Client side of the crop recommendation request."""
import logging
from typing import Optional
from uuid import UUID

import httpx

from cropcast.client.api import ApiError, CropCastAPI
from cropcast.client.session import NotAuthenticatedError, SessionStore
from cropcast.client.store import Observable
from cropcast.schemas import CropRecommendationRecord, FieldResponse
from cropcast.schemas.functions import GeneratedRecommendation

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to load recommendations. Please try again."


class RecommendationWorkflow(Observable):
    """Requests suggestions for one field at a time and offers a manual retry.

    A second request for a field whose request is still running is ignored.
    """

    def __init__(self, api: CropCastAPI, session_store: SessionStore):
        super().__init__()
        self._api = api
        self._session_store = session_store
        self.field: Optional[FieldResponse] = None
        self.recommendations: list[GeneratedRecommendation] = []
        self.loading = False
        self.error: Optional[str] = None
        self._in_flight: set[UUID] = set()

    def is_pending(self, field_id: UUID) -> bool:
        return field_id in self._in_flight

    async def request(self, field: FieldResponse) -> list[GeneratedRecommendation]:
        if field.id in self._in_flight:
            return self.recommendations

        self.field = field
        self.recommendations = []
        self.loading = True
        self.error = None
        self._notify()

        self._in_flight.add(field.id)
        recommendations: list[GeneratedRecommendation] = []
        error = FAILURE_MESSAGE
        try:
            session = self._session_store.get_session()
            if session is None:
                raise NotAuthenticatedError("Not authenticated")
            recommendations = await self._api.request_recommendations(field, token=session.access_token)
            error = None
        except (ApiError, httpx.HTTPError, NotAuthenticatedError) as exc:
            logger.error("Error fetching recommendations for field %s: %s", field.id, exc)
        finally:
            self._in_flight.discard(field.id)
            if self.field is not None and self.field.id == field.id:
                self.recommendations = recommendations
                self.error = error
                self.loading = False
                self._notify()
        return recommendations

    async def retry(self) -> list[GeneratedRecommendation]:
        if self.field is None:
            return []
        return await self.request(self.field)

    async def history(self, field_id: UUID) -> list[CropRecommendationRecord]:
        """Rows persisted by earlier requests for a field."""
        return await self._api.field_recommendations(field_id)
