"""Legacy session authentication.

SessionAuthenticator owns the one Bill.com v2 session shared by the legacy
client and the delegated-auth v3 client. Logins are single-flight: however many
callers find the session missing or expired at the same moment, exactly one
``Login.json`` request is sent and every caller gets its outcome.

Usage:
    auth = SessionAuthenticator(settings, http)
    session = await auth.ensure_authenticated()
    info = auth.get_session_info()   # None unless a valid session exists
    await auth.logout()
"""

import asyncio
import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx

from .config import BillcomSettings
from .errors import BillcomError, LoginError, ParseError
from .transport import post_legacy_form

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """One authenticated legacy login. Replaced wholesale, never mutated.

    ``expires_at`` is a monotonic-clock deadline used for validity checks.
    ``expires_at_wall`` is the same instant as a Unix timestamp, for display.
    """

    session_id: str
    org_id: str
    user_name: str
    dev_key: str
    environment: str
    expires_at: float
    expires_at_wall: float = 0.0

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at

    def info(self) -> dict[str, Any]:
        """Public fields, keyed the way the remote API names them."""
        return {
            "sessionId": self.session_id,
            "orgId": self.org_id,
            "userId": self.user_name,
            "devKey": self.dev_key,
            "environment": self.environment,
            "expiresAt": datetime.fromtimestamp(self.expires_at_wall, tz=timezone.utc).isoformat(),
        }


class SessionAuthenticator:
    """Creates, reuses and clears the shared legacy session."""

    def __init__(
        self,
        settings: BillcomSettings,
        http: httpx.AsyncClient,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self._http = http
        self._clock = clock
        self._wall_clock = wall_clock
        self._session: Session | None = None
        self._lock = asyncio.Lock()
        self._login_task: asyncio.Task[Session] | None = None
        # Bumped by logout; a login started under an older generation is discarded
        self._generation = 0

    @property
    def session(self) -> Session | None:
        """The current session if it has not expired."""
        session = self._session
        if session is not None and session.is_valid(self._clock()):
            return session
        return None

    @property
    def login_in_flight(self) -> bool:
        return self._login_task is not None

    async def ensure_authenticated(self) -> Session:
        """Return a valid session, logging in at most once across concurrent callers.

        Raises:
            TransportError: Login request could not be sent
            BillcomHTTPError: Login returned a non-2xx status
            LoginError: Login envelope reported failure
        """
        session = self.session
        if session is not None:
            return session

        async with self._lock:
            session = self.session
            if session is not None:
                return session
            if self._login_task is None:
                self._login_task = asyncio.ensure_future(self._login())
            task = self._login_task

        # shield: a cancelled waiter must not cancel the login other callers share
        return await asyncio.shield(task)

    async def _login(self) -> Session:
        generation = self._generation
        self._session = None
        try:
            settings = self.settings
            data = await post_legacy_form(
                self._http,
                f"{settings.legacy_base_url}/Login.json",
                {
                    "userName": settings.username,
                    "password": settings.password,
                    "orgId": settings.org_id,
                    "devKey": settings.dev_key,
                },
                error_prefix="Bill.com login failed",
                error_cls=LoginError,
            )
            session_id = data.get("sessionId") if isinstance(data, dict) else None
            if not session_id:
                raise ParseError(f"Bill.com login failed: no sessionId in response: {data!r}")

            if generation != self._generation:
                logger.info("Discarding Bill.com session from a login that finished after logout")
                raise LoginError("Bill.com login failed: logged out while login was in progress")

            lifetime = settings.session_lifetime
            session = Session(
                session_id=session_id,
                org_id=settings.org_id,
                user_name=settings.username,
                dev_key=settings.dev_key,
                environment=settings.environment,
                expires_at=self._clock() + lifetime,
                expires_at_wall=self._wall_clock() + lifetime,
            )
            self._session = session
            logger.info(f"Bill.com session established for org {settings.org_id} ({settings.environment})")
            return session
        finally:
            if self._login_task is asyncio.current_task():
                self._login_task = None

    def get_session_info(self) -> dict[str, Any] | None:
        """Public fields of the current valid session, or None. Never logs in."""
        session = self.session
        return session.info() if session is not None else None

    async def logout(self) -> None:
        """Best-effort remote logout; the local session is always cleared.

        A login still in flight is detached: its waiters get LoginError and the
        session it obtains is never installed.
        """
        self._generation += 1
        self._login_task = None
        session = self._session
        if session is None:
            return

        try:
            await post_legacy_form(
                self._http,
                f"{self.settings.legacy_base_url}/Logout.json",
                {
                    "devKey": session.dev_key,
                    "sessionId": session.session_id,
                    "data": json.dumps({}),
                },
                error_prefix="Bill.com logout failed",
            )
            logger.info("Bill.com session logged out")
        except BillcomError as e:
            logger.warning(f"Ignoring logout failure: {e}")
        finally:
            if self._session is session:
                self._session = None
