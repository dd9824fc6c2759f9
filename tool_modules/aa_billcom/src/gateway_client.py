"""Bill.com v3 gateway client using delegated auth.

Reuses the legacy session: each request sends the ``devKey`` and ``sessionId``
headers obtained from the shared SessionAuthenticator instead of running its
own credential flow.
"""

import json
import logging
from typing import Any

import httpx

from .envelopes import Failure, decode_gateway, unwrap
from .errors import BillcomError, BillcomHTTPError, ParseError
from .session import SessionAuthenticator
from .transport import send

logger = logging.getLogger(__name__)

BODY_METHODS = ("POST", "PUT", "PATCH")


def build_query(params: dict[str, Any] | None) -> dict[str, str]:
    """Drop absent values and render booleans the way the gateway expects."""
    query: dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        else:
            query[key] = str(value)
    return query


class GatewayClient:
    """JSON requests against the v3 gateway."""

    def __init__(self, authenticator: SessionAuthenticator, http: httpx.AsyncClient):
        self.authenticator = authenticator
        self._http = http

    @property
    def base_url(self) -> str:
        return self.authenticator.settings.gateway_base_url

    async def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        query_params: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and unwrap the response.

        Returns ``items`` if present, else ``data``, else the parsed body.

        Raises:
            BillcomError: Auth, transport, parse or remote failure
        """
        session = await self.authenticator.ensure_authenticated()
        if not session.session_id:
            raise BillcomError("Failed to obtain session ID from v2 client")

        method = method.upper()
        headers = {
            "Content-Type": "application/json",
            "devKey": session.dev_key,
            "sessionId": session.session_id,
        }
        kwargs: dict[str, Any] = {"headers": headers, "params": build_query(query_params)}
        if body is not None and method in BODY_METHODS:
            kwargs["json"] = body

        response = await send(self._http, method, f"{self.base_url}{path}", **kwargs)
        text = response.text

        try:
            parsed = json.loads(text) if text else {}
        except ValueError as e:
            if response.is_success:
                raise ParseError(f"Invalid JSON response from v3 API: {text}", raw=text) from e
            raise BillcomHTTPError(
                f"Bill.com v3 API error [UNKNOWN_ERROR]: HTTP {response.status_code} {text}",
                status_code=response.status_code,
                body=text,
            ) from e

        envelope = decode_gateway(parsed, response.is_success)
        if isinstance(envelope, Failure):
            code = envelope.code or "UNKNOWN_ERROR"
            message = envelope.message or f"HTTP {response.status_code}"
            raise BillcomHTTPError(
                f"Bill.com v3 API error [{code}]: {message}",
                status_code=response.status_code,
                body=text,
            )
        return unwrap(envelope)

    async def get(self, path: str, query_params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, query_params=query_params)

    async def post(self, path: str, body: dict[str, Any] | None = None) -> Any:
        return await self.request("POST", path, body=body)

    async def put(self, path: str, body: dict[str, Any] | None = None) -> Any:
        return await self.request("PUT", path, body=body)

    async def patch(self, path: str, body: dict[str, Any] | None = None) -> Any:
        return await self.request("PATCH", path, body=body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
