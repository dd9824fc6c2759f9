"""Composition root for the Bill.com clients.

One BillcomContext is built by the host and handed to every Bill.com tool
module, so all tools share a single HTTP connection pool and a single legacy
session.
"""

import logging

import httpx

from .config import BillcomSettings, load_settings
from .gateway_client import GatewayClient
from .legacy_client import LegacyClient
from .session import SessionAuthenticator
from .spend_client import SpendClient

logger = logging.getLogger(__name__)


class BillcomContext:
    """Owns the HTTP client, the session authenticator and the three API clients."""

    def __init__(
        self,
        settings: BillcomSettings,
        http: httpx.AsyncClient,
        authenticator: SessionAuthenticator,
    ):
        self.settings = settings
        self.http = http
        self.authenticator = authenticator
        self.legacy = LegacyClient(authenticator, http)
        self.gateway = GatewayClient(authenticator, http)
        self.spend = SpendClient(settings, http)

    @classmethod
    def from_settings(
        cls,
        settings: BillcomSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "BillcomContext":
        """Build a context with a fresh AsyncClient.

        Args:
            settings: Connection settings
            transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
        """
        http = httpx.AsyncClient(timeout=settings.request_timeout, transport=transport)
        return cls(settings, http, SessionAuthenticator(settings, http))

    @classmethod
    def from_env(cls) -> "BillcomContext":
        return cls.from_settings(load_settings())

    async def aclose(self) -> None:
        """Log out (best effort) and close the HTTP client."""
        try:
            await self.authenticator.logout()
        finally:
            if not self.http.is_closed:
                await self.http.aclose()
        logger.info("Bill.com context closed")
