"""
Session Store

The single login session of the device, kept at "@cardapio:sessao:current".
The session embeds a snapshot of the user, not a reference, and is always
replaced wholesale.

A session whose login time is older than the configured TTL (24h by
default) is treated as absent and purged the next time it is read.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from pydantic import ValidationError

from cardapio.core.exceptions import CardapioError, SessionNotFoundError
from cardapio.core.utils import as_utc, utc_now
from cardapio.schemas import Session, SessionInfo, User
from cardapio.services.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

CURRENT_SESSION_KEY = "current"


class SessionStore:
    """
    Read and replace the current login session.

    Attributes:
        store: Key-value store scoped to the session prefix
        ttl: How long a login stays valid
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.ttl = ttl
        self._clock = clock

    async def _load(self) -> Optional[Session]:
        raw = await self.store.get(CURRENT_SESSION_KEY)
        if raw is None:
            return None
        try:
            return Session.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Discarding malformed session: {e.error_count()} errors")
            return None

    async def _write(self, session: Session) -> None:
        await self.store.save(CURRENT_SESSION_KEY, session.to_record())

    async def save_session(self, user: User) -> None:
        """Start a new session for the user, replacing any previous one."""
        await self._write(Session(user=user, login_at=self._clock(), active=True))
        logger.info(f"Session started for user {user.id}")

    async def get_session(self) -> Optional[User]:
        """
        Return the signed-in user.

        Returns:
            The session's user; None when there is no session, it is
            inactive, it has expired (and was purged) or it cannot be read
        """
        try:
            session = await self._load()
            if session is None or not session.active:
                return None

            if self._clock() - as_utc(session.login_at) > self.ttl:
                logger.info(f"Session for user {session.user.id} expired")
                await self.clear_session()
                return None

            return session.user
        except CardapioError as e:
            logger.error(f"Error reading session: {e.message}")
            return None

    async def clear_session(self) -> None:
        await self.store.remove(CURRENT_SESSION_KEY)
        logger.debug("Session cleared")

    async def has_active_session(self) -> bool:
        return await self.get_session() is not None

    async def update_session_user(self, user: User) -> None:
        """
        Replace the user snapshot kept in the session.

        Raises:
            SessionNotFoundError: No session is stored
        """
        session = await self._load()
        if session is None:
            raise SessionNotFoundError("No active session found")
        await self._write(session.model_copy(update={"user": user}))

    async def is_admin(self) -> bool:
        user = await self.get_session()
        return user is not None and user.is_admin

    async def renew_session(self) -> None:
        """
        Restart the session clock from now.

        Raises:
            SessionNotFoundError: No session is stored
        """
        session = await self._load()
        if session is None:
            raise SessionNotFoundError("No active session found")
        await self._write(session.model_copy(update={"login_at": self._clock()}))
        logger.debug(f"Session renewed for user {session.user.id}")

    async def get_session_info(self) -> SessionInfo:
        """Describe the stored session without checking expiry."""
        try:
            session = await self._load()
        except CardapioError as e:
            logger.error(f"Error reading session info: {e.message}")
            return SessionInfo()

        if session is None:
            return SessionInfo()

        elapsed = self._clock() - as_utc(session.login_at)
        return SessionInfo(
            user=session.user,
            login_at=session.login_at,
            minutes_logged_in=int(elapsed.total_seconds() // 60),
        )
