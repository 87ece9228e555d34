"""Chat transcript: history replay and optimistic send."""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

import httpx

from cropcast.client.api import ApiError, CropCastAPI
from cropcast.client.session import NotAuthenticatedError, SessionStore
from cropcast.client.store import Observable
from cropcast.schemas import ChatMessageResponse

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50
ERROR_REPLY = "Sorry, I encountered an error. Please try again."


@dataclass
class TranscriptEntry:
    id: str
    text: str
    is_user: bool
    timestamp: datetime


def expand_history(rows: list[ChatMessageResponse]) -> list[TranscriptEntry]:
    """Each stored row becomes the question followed by its answer."""
    entries = []
    for row in rows:
        entries.append(TranscriptEntry(f"{row.id}-user", row.message, True, row.created_at))
        entries.append(TranscriptEntry(f"{row.id}-bot", row.response, False, row.created_at))
    return entries


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ChatWorkflow(Observable):
    def __init__(self, api: CropCastAPI, session_store: SessionStore):
        super().__init__()
        self._api = api
        self._session_store = session_store
        self.transcript: list[TranscriptEntry] = []
        self.input_text = ""
        self.pending = False
        self.loading_history = True

    @property
    def can_send(self) -> bool:
        return not self.pending

    async def load_history(self) -> None:
        try:
            rows = await self._api.chat_history(limit=HISTORY_LIMIT)
        except (ApiError, httpx.HTTPError):
            logger.exception("Error loading chat history")
        else:
            self.transcript = expand_history(rows)
        self.loading_history = False
        self._notify()

    async def send(self, text: Optional[str] = None) -> Optional[TranscriptEntry]:
        """Send ``text`` (or the pending input) and append the reply.

        Returns the assistant entry, or None when nothing was sent.
        """
        text = self.input_text if text is None else text
        if not text.strip() or self.pending:
            return None

        self.transcript.append(TranscriptEntry(f"temp-{uuid4().hex}", text, True, _now()))
        self.input_text = ""
        self.pending = True
        self._notify()

        entry = TranscriptEntry(f"error-{uuid4().hex}", ERROR_REPLY, False, _now())
        try:
            session = self._session_store.get_session()
            if session is None:
                raise NotAuthenticatedError("Not authenticated")
            reply = await self._api.send_chat(text, token=session.access_token)
            entry = TranscriptEntry(f"bot-{uuid4().hex}", reply, False, _now())
        except (ApiError, httpx.HTTPError, NotAuthenticatedError) as exc:
            logger.error("Error sending message: %s", exc)
        finally:
            # every send leaves a reply or the error entry behind
            self.transcript.append(entry)
            self.pending = False
            self._notify()
        return entry
