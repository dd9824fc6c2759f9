"""Shared helpers for Bill.com tool modules: response formatting and error mapping."""

import logging
from typing import Any

from server.errors import ErrorCodes, tool_error, tool_info
from server.utils import format_json

from .errors import (
    BillcomError,
    BillcomHTTPError,
    ConfigurationError,
    LoginError,
    ParseError,
    TransportError,
)

logger = logging.getLogger(__name__)

HTTP_STATUS_CODES = {
    401: ErrorCodes.AUTH_FAILED,
    403: ErrorCodes.PERMISSION_DENIED,
    404: ErrorCodes.NOT_FOUND,
    409: ErrorCodes.CONFLICT,
    429: ErrorCodes.RATE_LIMITED,
}


def error_code(exc: Exception) -> str:
    """Map an exception to an ErrorCodes value."""
    if isinstance(exc, ConfigurationError):
        return ErrorCodes.CONFIG_MISSING
    if isinstance(exc, LoginError):
        return ErrorCodes.AUTH_FAILED
    if isinstance(exc, TransportError):
        return ErrorCodes.TIMEOUT if exc.timed_out else ErrorCodes.CONNECTION_FAILED
    if isinstance(exc, BillcomHTTPError):
        if exc.status_code in HTTP_STATUS_CODES:
            return HTTP_STATUS_CODES[exc.status_code]
        if exc.status_code >= 500:
            return ErrorCodes.SERVICE_UNAVAILABLE
        return ErrorCodes.API_ERROR
    if isinstance(exc, ParseError):
        return ErrorCodes.PARSE_ERROR
    if isinstance(exc, BillcomError):
        return ErrorCodes.API_ERROR
    return ErrorCodes.INVALID_INPUT


def error_hint(exc: Exception) -> str | None:
    if isinstance(exc, ConfigurationError):
        return "Set the BILLCOM_* variables in the environment or .env and restart the server"
    if isinstance(exc, LoginError) or (isinstance(exc, BillcomHTTPError) and exc.status_code == 401):
        return "Check BILLCOM_USERNAME, BILLCOM_PASSWORD, BILLCOM_ORG_ID and BILLCOM_DEV_KEY"
    if isinstance(exc, TransportError):
        return "Check network access to Bill.com and BILLCOM_ENVIRONMENT"
    return None


def failed(action: str, exc: Exception) -> str:
    """Render a caught failure, e.g. ``failed("searching vendors", e)``."""
    logger.warning(f"Error {action}: {exc}")
    return tool_error(f"Error {action}", error=str(exc), code=error_code(exc), hint=error_hint(exc))


def found(label: str, records: list[Any] | None) -> str:
    """Render a search result list, e.g. ``Found 3 vendor(s):``."""
    if not records:
        return tool_info(f"No {label}s found")
    return f"✅ Found {len(records)} {label}(s):\n\n{format_json(records)}"


def record(title: str, data: Any) -> str:
    """Render a single record or API result under a heading."""
    return f"✅ {title}\n\n{format_json(data)}"
