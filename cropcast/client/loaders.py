"""
Scoped list loaders

A loader holds one list fetched for one scope key (a farm id or a user id).
Changing the scope drops the current list and starts a new fetch; results
of superseded fetches are discarded. Mutations go through ``execute`` and
are always followed by a full re-fetch.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, Hashable, Optional, TypeVar

import httpx

from cropcast.client.api import ApiError, CropCastAPI
from cropcast.client.farm_registry import FarmRegistry
from cropcast.client.session import SessionStore
from cropcast.client.store import Observable

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOAD_ERROR_MESSAGE = "Something went wrong while loading. Please try again."


class ListLoader(Observable, Generic[T]):
    def __init__(self, fetch: Callable[[Any], Awaitable[list[T]]], name: str = "items"):
        super().__init__()
        self._fetch = fetch
        self.name = name
        self.scope: Optional[Hashable] = None
        self.items: list[T] = []
        self.loading = False
        self.error: Optional[str] = None
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    def set_scope(self, scope: Optional[Hashable]) -> None:
        """Switch to a new scope. Must be called from inside the event loop."""
        if scope == self.scope:
            return
        self.scope = scope
        self.items = []
        self.error = None
        if scope is None:
            self._generation += 1
            self.loading = False
            self._task = None
            self._notify()
            return
        self._start()

    def _start(self) -> asyncio.Task:
        self._generation += 1
        self.loading = True
        self._notify()
        self._task = asyncio.get_running_loop().create_task(self._load(self.scope, self._generation))
        self._task.add_done_callback(self._log_crash)
        return self._task

    def _log_crash(self, task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("Loading %s crashed", self.name, exc_info=task.exception())

    async def _load(self, scope: Hashable, generation: int) -> None:
        items = None
        try:
            items = await self._fetch(scope)
        except (ApiError, httpx.HTTPError):
            logger.exception("Error loading %s for %s", self.name, scope)
        finally:
            if generation == self._generation:
                if items is None:
                    self.error = LOAD_ERROR_MESSAGE
                else:
                    self.items = items
                    self.error = None
                self.loading = False
                self._notify()

    async def wait(self) -> None:
        """Wait for the outstanding fetch, if any."""
        if self._task is not None:
            await self._task

    async def reload(self) -> None:
        """Re-fetch the current scope; the current list stays until it lands."""
        if self.scope is None:
            return
        await self._start()

    async def execute(self, command: Awaitable[T]) -> T:
        """Await a mutation, then re-fetch. A failed mutation propagates and skips the re-fetch."""
        result = await command
        await self.reload()
        return result

    def bind_to_farms(self, registry: FarmRegistry) -> Callable[[], None]:
        def on_change(reg: FarmRegistry):
            self.set_scope(reg.selected_id)

        on_change(registry)
        return registry.subscribe(on_change)

    def bind_to_session(self, session_store: SessionStore) -> Callable[[], None]:
        def on_change(session):
            self.set_scope(session.user.id if session else None)

        on_change(session_store.get_session())
        return session_store.subscribe(on_change)


def fields_loader(api: CropCastAPI, registry: FarmRegistry) -> ListLoader:
    loader = ListLoader(api.list_fields, name="fields")
    loader.bind_to_farms(registry)
    return loader


def crops_loader(api: CropCastAPI, registry: FarmRegistry) -> ListLoader:
    loader = ListLoader(api.list_crops, name="crops")
    loader.bind_to_farms(registry)
    return loader


def reminders_loader(api: CropCastAPI, session_store: SessionStore) -> ListLoader:
    async def fetch(_user_id):
        return await api.list_reminders()

    loader = ListLoader(fetch, name="reminders")
    loader.bind_to_session(session_store)
    return loader
