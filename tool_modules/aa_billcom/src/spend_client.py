"""Bill.com Spend & Expense client using token auth.

Authenticates every request with the static ``apiToken`` header and never
touches the legacy session.
"""

import json
import logging
from typing import Any

import httpx

from .config import BillcomSettings
from .envelopes import Failure, decode_spend, unwrap
from .errors import BillcomHTTPError, ConfigurationError, EnvelopeError, ParseError
from .gateway_client import build_query
from .transport import send

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Spend API error"


class SpendClient:
    """JSON requests against the Spend & Expense API."""

    def __init__(self, settings: BillcomSettings, http: httpx.AsyncClient):
        self._api_token = settings.spend_api_token
        self._environment = settings.environment
        self._base_url = settings.spend_base_url
        self._http = http

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def environment(self) -> str:
        return self._environment

    def is_configured(self) -> bool:
        return bool(self._api_token)

    def _ensure_configured(self) -> str:
        if not self._api_token:
            raise ConfigurationError(
                "BILLCOM_SPEND_API_TOKEN must be set in environment variables for Spend & Expense API access"
            )
        return self._api_token

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> Any:
        token = self._ensure_configured()

        headers = {
            "apiToken": token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        kwargs: dict[str, Any] = {"headers": headers, "params": build_query(params)}
        if data is not None:
            kwargs["json"] = data

        response = await send(self._http, method, f"{self._base_url}/{endpoint.lstrip('/')}", **kwargs)
        text = response.text

        if not response.is_success:
            try:
                parsed = json.loads(text) if text else {}
            except ValueError:
                parsed = None
            envelope = decode_spend(parsed, ok=False) if parsed is not None else Failure()
            if envelope.message:
                message = f"{ERROR_PREFIX}: {envelope.message}"
            else:
                message = f"{ERROR_PREFIX}: {response.status_code} {text}".rstrip()
            raise BillcomHTTPError(message, status_code=response.status_code, body=text)

        if not text:
            return None
        try:
            parsed = json.loads(text)
        except ValueError as e:
            raise ParseError(f"{ERROR_PREFIX}: invalid JSON response: {text}", raw=text) from e

        envelope = decode_spend(parsed, ok=True)
        if isinstance(envelope, Failure):
            message = envelope.message or "Unknown error"
            raise EnvelopeError(f"{ERROR_PREFIX}: {message}", code=envelope.code, details=envelope.details)
        return unwrap(envelope)

    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        return await self._request("GET", endpoint, params=params)

    async def post(self, endpoint: str, data: dict[str, Any] | None = None) -> Any:
        return await self._request("POST", endpoint, data=data)

    async def patch(self, endpoint: str, data: dict[str, Any] | None = None) -> Any:
        return await self._request("PATCH", endpoint, data=data)
