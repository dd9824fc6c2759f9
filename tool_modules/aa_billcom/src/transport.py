"""HTTP helpers shared by the Bill.com clients.

Wraps httpx so that network failures surface as TransportError and JSON
problems as ParseError, and implements the legacy form-POST round trip used by
both login and regular legacy calls.
"""

import json
import logging
from typing import Any

import httpx

from .envelopes import Failure, decode_legacy, describe_legacy_failure
from .errors import BillcomHTTPError, EnvelopeError, ParseError, TransportError

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


async def send(http: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> httpx.Response:
    """Issue one request, translating httpx failures into TransportError."""
    logger.debug(f"{method} {url}")
    try:
        return await http.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        raise TransportError(f"Request to {url} timed out: {e}", timed_out=True) from e
    except httpx.HTTPError as e:
        raise TransportError(f"Could not reach {url}: {e}") from e


def parse_json(text: str, message: str) -> Any:
    """Parse ``text`` as JSON, raising ParseError with ``message: text`` on failure."""
    try:
        return json.loads(text)
    except ValueError as e:
        raise ParseError(f"{message}: {text}", raw=text) from e


async def post_legacy_form(
    http: httpx.AsyncClient,
    url: str,
    fields: dict[str, str],
    error_prefix: str,
    error_cls: type[EnvelopeError] = EnvelopeError,
    files: dict[str, Any] | None = None,
) -> Any:
    """POST to a legacy v2 endpoint and return ``response_data``.

    Args:
        http: Shared async client
        url: Full endpoint URL (``.../Endpoint.json``)
        fields: Form fields
        error_prefix: Message prefix, e.g. "Bill.com API error"
        error_cls: Envelope error class to raise on non-zero status
        files: Multipart file parts; when given the body is multipart

    Raises:
        TransportError, BillcomHTTPError, ParseError, or ``error_cls``
    """
    if files:
        response = await send(http, "POST", url, data=fields, files=files)
    else:
        response = await send(http, "POST", url, data=fields, headers={"Content-Type": FORM_CONTENT_TYPE})

    if not response.is_success:
        raise BillcomHTTPError(
            f"{error_prefix}: {response.status_code} {response.text}",
            status_code=response.status_code,
            body=response.text,
        )

    envelope = decode_legacy(parse_json(response.text, f"{error_prefix}: invalid JSON response"))
    if isinstance(envelope, Failure):
        raise error_cls(
            f"{error_prefix}: {describe_legacy_failure(envelope)}",
            code=envelope.code,
            details=envelope.details,
        )
    return envelope.payload
