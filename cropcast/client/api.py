"""Async HTTP wrapper over the CropCast API."""
import logging
from typing import Any, Callable, Optional, Union
from uuid import UUID

import httpx
from pydantic import BaseModel, ValidationError

from cropcast.client.session import Session
from cropcast.schemas import (
    ChatMessageResponse,
    CropCreate,
    CropRecommendationRecord,
    CropResponse,
    CropUpdate,
    DashboardResponse,
    FarmCreate,
    FarmResponse,
    FarmUpdate,
    FieldCreate,
    FieldResponse,
    FieldUpdate,
    ProfileResponse,
    ProfileUpdate,
    ReminderCreate,
    ReminderResponse,
    ReminderUpdate,
    UserResponse,
    WeatherSnapshot,
)
from cropcast.schemas.functions import GeneratedRecommendation

logger = logging.getLogger(__name__)

Id = Union[UUID, str]


class ApiError(Exception):
    """A non-2xx answer from the API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail")
        if message:
            return message if isinstance(message, str) else str(message)
    return response.reason_phrase


def _require(data: Any, key: str) -> Any:
    """Pull ``key`` out of a 2xx body, treating any other shape as an API error."""
    if not isinstance(data, dict) or key not in data:
        raise ApiError(200, f"Response has no {key!r}")
    return data[key]


def _body(data: Union[BaseModel, dict], partial: bool = False) -> dict:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", exclude_unset=partial)
    return data


class CropCastAPI:
    def __init__(
        self,
        base_url: str,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = 30.0,
    ):
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self._token_provider = token_provider

    async def __aenter__(self) -> "CropCastAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, *, token: Optional[str] = None, **kwargs) -> Any:
        token = token or (self._token_provider() if self._token_provider else None)
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        response = await self._client.request(method, path, headers=headers, **kwargs)
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise ApiError(response.status_code, "Malformed response body")

    # ── Auth ──────────────────────────────────────────────────
    async def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> UserResponse:
        data = await self._request(
            "POST", "/auth/signup", json={"email": email, "password": password, "full_name": full_name}
        )
        return UserResponse.model_validate(data)

    async def sign_in(self, email: str, password: str) -> Session:
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        token = _require(data, "access_token")
        user = UserResponse.model_validate(await self._request("GET", "/auth/me", token=token))
        return Session(access_token=token, user=user)

    # ── Profile / dashboard ──────────────────────────────────
    async def get_profile(self) -> ProfileResponse:
        return ProfileResponse.model_validate(await self._request("GET", "/profile"))

    async def update_profile(self, data: Union[ProfileUpdate, dict]) -> ProfileResponse:
        return ProfileResponse.model_validate(await self._request("PUT", "/profile", json=_body(data, partial=True)))

    async def dashboard(self, farm_id: Optional[Id] = None) -> DashboardResponse:
        params = {"farm_id": str(farm_id)} if farm_id else None
        return DashboardResponse.model_validate(await self._request("GET", "/dashboard", params=params))

    async def weather(self, location: str) -> WeatherSnapshot:
        return WeatherSnapshot.model_validate(await self._request("GET", "/weather", params={"location": location}))

    # ── Farms ─────────────────────────────────────────────────
    async def list_farms(self) -> list[FarmResponse]:
        return [FarmResponse.model_validate(item) for item in await self._request("GET", "/farms")]

    async def create_farm(self, data: Union[FarmCreate, dict]) -> FarmResponse:
        return FarmResponse.model_validate(await self._request("POST", "/farms", json=_body(data)))

    async def update_farm(self, farm_id: Id, data: Union[FarmUpdate, dict]) -> FarmResponse:
        data = await self._request("PUT", f"/farms/{farm_id}", json=_body(data, partial=True))
        return FarmResponse.model_validate(data)

    async def delete_farm(self, farm_id: Id) -> None:
        await self._request("DELETE", f"/farms/{farm_id}")

    # ── Fields ────────────────────────────────────────────────
    async def list_fields(self, farm_id: Id) -> list[FieldResponse]:
        return [FieldResponse.model_validate(item) for item in await self._request("GET", f"/farms/{farm_id}/fields")]

    async def create_field(self, farm_id: Id, data: Union[FieldCreate, dict]) -> FieldResponse:
        data = await self._request("POST", f"/farms/{farm_id}/fields", json=_body(data))
        return FieldResponse.model_validate(data)

    async def update_field(self, field_id: Id, data: Union[FieldUpdate, dict]) -> FieldResponse:
        data = await self._request("PUT", f"/fields/{field_id}", json=_body(data, partial=True))
        return FieldResponse.model_validate(data)

    async def delete_field(self, field_id: Id) -> None:
        await self._request("DELETE", f"/fields/{field_id}")

    async def field_recommendations(self, field_id: Id) -> list[CropRecommendationRecord]:
        data = await self._request("GET", f"/fields/{field_id}/recommendations")
        return [CropRecommendationRecord.model_validate(item) for item in data]

    # ── Crops ─────────────────────────────────────────────────
    async def list_crops(self, farm_id: Id, limit: Optional[int] = None) -> list[CropResponse]:
        params = {"limit": limit} if limit else None
        data = await self._request("GET", f"/farms/{farm_id}/crops", params=params)
        return [CropResponse.model_validate(item) for item in data]

    async def create_crop(self, farm_id: Id, data: Union[CropCreate, dict]) -> CropResponse:
        return CropResponse.model_validate(await self._request("POST", f"/farms/{farm_id}/crops", json=_body(data)))

    async def update_crop(self, crop_id: Id, data: Union[CropUpdate, dict]) -> CropResponse:
        data = await self._request("PUT", f"/crops/{crop_id}", json=_body(data, partial=True))
        return CropResponse.model_validate(data)

    async def delete_crop(self, crop_id: Id) -> None:
        await self._request("DELETE", f"/crops/{crop_id}")

    # ── Reminders ─────────────────────────────────────────────
    async def list_reminders(self) -> list[ReminderResponse]:
        return [ReminderResponse.model_validate(item) for item in await self._request("GET", "/reminders")]

    async def create_reminder(self, data: Union[ReminderCreate, dict]) -> ReminderResponse:
        return ReminderResponse.model_validate(await self._request("POST", "/reminders", json=_body(data)))

    async def update_reminder(self, reminder_id: Id, data: Union[ReminderUpdate, dict]) -> ReminderResponse:
        data = await self._request("PUT", f"/reminders/{reminder_id}", json=_body(data, partial=True))
        return ReminderResponse.model_validate(data)

    async def delete_reminder(self, reminder_id: Id) -> None:
        await self._request("DELETE", f"/reminders/{reminder_id}")

    # ── Chat ──────────────────────────────────────────────────
    async def chat_history(self, limit: int = 50) -> list[ChatMessageResponse]:
        data = await self._request("GET", "/chat/messages", params={"limit": limit})
        return [ChatMessageResponse.model_validate(item) for item in data]

    async def send_chat(self, message: str, token: Optional[str] = None) -> str:
        data = await self._request("POST", "/functions/v1/cropcast-chat", token=token, json={"message": message})
        reply = _require(data, "response")
        if not isinstance(reply, str):
            raise ApiError(200, "Response is not text")
        return reply

    # ── Recommendations ───────────────────────────────────────
    async def request_recommendations(
        self, field: FieldResponse, token: Optional[str] = None
    ) -> list[GeneratedRecommendation]:
        body = {
            "fieldId": str(field.id),
            "soilType": field.soil_type.value,
            "location": field.field_location,
            "previousCrops": list(field.previous_crops),
        }
        data = await self._request("POST", "/functions/v1/crop-recommendation", token=token, json=body)
        items = _require(data, "recommendations") or []
        if not isinstance(items, list):
            raise ApiError(200, "Recommendations are not a list")
        try:
            return [GeneratedRecommendation.model_validate(item) for item in items]
        except ValidationError as exc:
            raise ApiError(200, f"Malformed recommendations: {exc.error_count()} errors")
