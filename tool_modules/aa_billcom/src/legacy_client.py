"""Bill.com legacy (v2) API client.

Every call is a form-encoded POST to ``{base}/{Endpoint}.json`` carrying the
developer key, the current session id and an optional JSON ``data`` field.
"""

import json
import logging
from typing import Any

import httpx

from .session import SessionAuthenticator
from .transport import post_legacy_form

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Bill.com API error"


class LegacyClient:
    """Authenticated calls against the v2 API."""

    def __init__(self, authenticator: SessionAuthenticator, http: httpx.AsyncClient):
        self.authenticator = authenticator
        self._http = http

    @property
    def base_url(self) -> str:
        return self.authenticator.settings.legacy_base_url

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.strip('/')}.json"

    async def call(self, endpoint: str, data: dict[str, Any] | None = None) -> Any:
        """Call a v2 endpoint and return its ``response_data``.

        Args:
            endpoint: Endpoint path without extension, e.g. "Crud/Read/Vendor"
            data: Request payload, sent JSON-encoded in the ``data`` form field

        Raises:
            BillcomError: Any transport, HTTP, parse or envelope failure
        """
        session = await self.authenticator.ensure_authenticated()

        fields = {"devKey": session.dev_key, "sessionId": session.session_id}
        if data is not None:
            fields["data"] = json.dumps(data)

        return await post_legacy_form(self._http, self._url(endpoint), fields, error_prefix=ERROR_PREFIX)

    async def upload(
        self,
        endpoint: str,
        data: dict[str, Any],
        file_name: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> Any:
        """Multipart variant of :meth:`call` with one ``file`` part."""
        session = await self.authenticator.ensure_authenticated()

        fields = {
            "devKey": session.dev_key,
            "sessionId": session.session_id,
            "data": json.dumps(data),
        }
        files = {"file": (file_name, content, content_type)}
        logger.info(f"Uploading {file_name} ({len(content)} bytes) to {endpoint}")
        return await post_legacy_form(
            self._http, self._url(endpoint), fields, error_prefix=ERROR_PREFIX, files=files
        )
