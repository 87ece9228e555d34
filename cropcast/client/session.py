"""Current identity and sign-in/sign-out notifications."""
import inspect
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

from cropcast.schemas import UserResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    access_token: str
    user: UserResponse


SessionListener = Callable[[Optional[Session]], Union[None, Awaitable[None]]]


class SessionStore:
    """Holds at most one session and tells subscribers when it changes."""

    def __init__(self):
        self._session: Optional[Session] = None
        self._listeners: list[SessionListener] = []

    def get_session(self) -> Optional[Session]:
        return self._session

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_token if self._session else None

    @property
    def user_id(self):
        return self._session.user.id if self._session else None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def set_session(self, session: Optional[Session]) -> None:
        """Replace the session and await every listener in subscription order."""
        previous = self._session
        self._session = session
        if previous == session:
            return
        for listener in list(self._listeners):
            result = listener(session)
            if inspect.isawaitable(result):
                await result

    async def sign_in(self, api, email: str, password: str) -> Session:
        session = await api.sign_in(email, password)
        await self.set_session(session)
        logger.info("Signed in as %s", session.user.email)
        return session

    async def sign_up(self, api, email: str, password: str, full_name: Optional[str] = None) -> Session:
        """Create the account, then sign in with it."""
        await api.sign_up(email, password, full_name=full_name)
        return await self.sign_in(api, email, password)

    async def sign_out(self) -> None:
        await self.set_session(None)


class NotAuthenticatedError(Exception):
    """Raised client-side when an action needs a session and there is none."""
