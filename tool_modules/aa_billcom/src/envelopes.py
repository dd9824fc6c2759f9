"""Response envelope decoders.

Each Bill.com API family wraps its payload differently. The decoders below turn
a parsed JSON body into one of a small set of frozen variants so the clients
can pattern-match on the outcome instead of probing dict keys inline.

Legacy (v2):   {response_status, response_message, response_data}
Gateway (v3):  {items?, data?, error?: {code, message}}
Spend (v3):    {data?, items?, results?, error?: {code, message, details?}}
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Success:
    """A single payload object (or any non-list payload)."""

    payload: Any


@dataclass(frozen=True)
class ItemList:
    """A list payload."""

    items: list[Any]


@dataclass(frozen=True)
class RawBody:
    """No recognised wrapper; the whole body is the result."""

    body: Any


@dataclass(frozen=True)
class Failure:
    """Logical failure signalled by the envelope."""

    code: str | None = None
    message: str | None = None
    details: Any = None


LegacyEnvelope = Success | Failure
GatewayEnvelope = ItemList | Success | RawBody | Failure
SpendEnvelope = Success | ItemList | RawBody | Failure


def decode_legacy(body: Any) -> LegacyEnvelope:
    """Decode a v2 envelope. Status 0 is success, anything else a failure."""
    if not isinstance(body, dict):
        return Failure(message=f"Unexpected response body: {body!r}")

    status = body.get("response_status")
    if status in (0, "0"):
        return Success(body.get("response_data"))

    message = body.get("response_message") or "Unknown error"
    data = body.get("response_data")
    code = None
    details = None
    if isinstance(data, dict):
        code = data.get("error_code")
        details = data.get("error_message")
    return Failure(code=code, message=message, details=details)


def describe_legacy_failure(failure: Failure) -> str:
    """Render a legacy failure as ``message`` plus remote error detail, if any."""
    text = failure.message or "Unknown error"
    if failure.details and failure.details != text:
        prefix = f"{failure.code}: " if failure.code else ""
        text = f"{text} ({prefix}{failure.details})"
    return text


def _error_field(body: Any) -> dict[str, Any] | None:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error:
            return error
    return None


def decode_gateway(body: Any, ok: bool) -> GatewayEnvelope:
    """Decode a delegated-auth v3 response.

    Args:
        body: Parsed JSON body (``{}`` for an empty body)
        ok: Whether the HTTP status was 2xx

    Success precedence is items, then data, then the raw body.
    """
    if not ok:
        error = _error_field(body) or {}
        return Failure(code=error.get("code"), message=error.get("message"))

    if isinstance(body, dict):
        if body.get("items") is not None:
            return ItemList(body["items"])
        if body.get("data") is not None:
            return Success(body["data"])
    return RawBody(body)


def decode_spend(body: Any, ok: bool) -> SpendEnvelope:
    """Decode a token-auth Spend response.

    Any truthy embedded ``error`` is a failure even on a 2xx status. An
    ``error`` object supplies code, message and details; any other value is
    the message.
    Success precedence is data, then items, then results, then the raw body.
    """
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        if error:
            return Failure(code=error.get("code"), message=error.get("message"), details=error.get("details"))
    elif error:
        return Failure(message=str(error))
    if not ok:
        return Failure()

    if isinstance(body, dict):
        if body.get("data") is not None:
            return Success(body["data"])
        if body.get("items") is not None:
            return ItemList(body["items"])
        if body.get("results") is not None:
            return ItemList(body["results"])
    return RawBody(body)


def unwrap(envelope: Success | ItemList | RawBody) -> Any:
    """Return the caller-facing value of a success variant."""
    if isinstance(envelope, ItemList):
        return envelope.items
    if isinstance(envelope, Success):
        return envelope.payload
    if isinstance(envelope, RawBody):
        return envelope.body
    raise TypeError(f"Not a success envelope: {envelope!r}")
