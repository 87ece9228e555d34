"""
Farm registry

Single owner of the caller's farm list and of the active farm selection.
Screens read ``farms``/``selected`` and subscribe for changes; only the
registry mutates them.
"""
import logging
from typing import Optional, Union
from uuid import UUID

import httpx

from cropcast.client.api import ApiError, CropCastAPI
from cropcast.client.session import Session, SessionStore
from cropcast.client.store import Observable
from cropcast.schemas import FarmCreate, FarmResponse, FarmUpdate

logger = logging.getLogger(__name__)


class FarmRegistry(Observable):
    def __init__(self, api: CropCastAPI, session_store: SessionStore):
        super().__init__()
        self._api = api
        self._session_store = session_store
        self.farms: list[FarmResponse] = []
        self.selected: Optional[FarmResponse] = None
        self.loading = True
        self._user_id = None
        self._unsubscribe = session_store.subscribe(self._on_session_change)

    @property
    def selected_id(self) -> Optional[UUID]:
        return self.selected.id if self.selected else None

    def close(self) -> None:
        self._unsubscribe()

    def _on_session_change(self, session: Optional[Session]):
        user_id = self._session_store.user_id
        if user_id != self._user_id:
            # farms of the previous identity must never outlive it
            self._user_id = user_id
            self.farms = []
            self.selected = None
            self.loading = session is not None
            self._notify()
        if session is None:
            if self.loading:
                self.loading = False
                self._notify()
            return None
        return self.refresh()

    def select(self, farm: Optional[FarmResponse]) -> None:
        """Local selection change; no network call."""
        if farm is self.selected:
            return
        self.selected = farm
        self._notify()

    def _resolve_selection(self, farms: list[FarmResponse]) -> Optional[FarmResponse]:
        if self.selected is not None:
            for farm in farms:
                if farm.id == self.selected.id:
                    return farm
        return farms[0] if farms else None

    async def refresh(self) -> None:
        """Re-fetch the owned farms and re-resolve the selection.

        On failure the previous state is kept.
        """
        session = self._session_store.get_session()
        if session is None:
            self.loading = False
            self._notify()
            return

        try:
            farms = await self._api.list_farms()
        except (ApiError, httpx.HTTPError):
            logger.exception("Error loading farms")
            self.loading = False
            self._notify()
            return

        if self._session_store.get_session() is not session:
            # signed out or switched identity while the request was in flight
            return

        self.farms = farms
        self.selected = self._resolve_selection(farms)
        self.loading = False
        self._notify()

    # ── Commands: mutate remotely, then re-fetch ──────────────
    async def create_farm(self, data: Union[FarmCreate, dict]) -> FarmResponse:
        farm = await self._api.create_farm(data)
        await self.refresh()
        return farm

    async def update_farm(self, farm_id: UUID, data: Union[FarmUpdate, dict]) -> FarmResponse:
        farm = await self._api.update_farm(farm_id, data)
        await self.refresh()
        return farm

    async def delete_farm(self, farm_id: UUID) -> None:
        await self._api.delete_farm(farm_id)
        if self.selected_id == farm_id:
            self.selected = None
        await self.refresh()
