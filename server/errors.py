"""Standardized tool response strings.

Tool functions return Markdown strings to the MCP client. Use these helpers
instead of ad-hoc formatting so success and failure look the same in every
module.

Usage:
    from server.errors import ErrorCodes, tool_error, tool_success

    return tool_error("Error searching vendors", error=str(e), code=ErrorCodes.AUTH_FAILED)
    return tool_success("Archived vendor", data={"id": vendor_id})
"""

import json
from typing import Any


def _format_value(key: str, value: Any) -> str:
    if isinstance(value, (list, dict)):
        formatted = json.dumps(value, indent=2, default=str)
        return f"\n**{key}:**\n```json\n{formatted}\n```"
    return f"\n**{key}:** {value}"


def tool_error(
    message: str,
    error: str | None = None,
    code: str | None = None,
    context: dict[str, Any] | None = None,
    hint: str | None = None,
) -> str:
    """Create a standardized error response string.

    Args:
        message: Main error message (shown prominently)
        error: Detailed error text (e.g., exception message)
        code: Error code for programmatic handling (see ErrorCodes)
        context: Additional context dict (e.g., {"vendor_id": "00901..."})
        hint: Helpful hint for resolving the error

    Returns:
        Formatted error string with ❌ prefix

    Examples:
        >>> tool_error("Vendor not found", code="NOT_FOUND")
        '❌ Vendor not found [NOT_FOUND]'
    """
    parts = [f"❌ {message}"]

    if error:
        parts.append(f"\n**Error:** {error}")

    if code:
        parts.append(f" [{code}]")

    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        parts.append(f"\n**Context:** {context_str}")

    if hint:
        parts.append(f"\n💡 **Hint:** {hint}")

    return "".join(parts)


def tool_success(
    message: str,
    data: dict[str, Any] | None = None,
    context: dict[str, Any] | None = None,
) -> str:
    """Create a standardized success response string.

    Lists and dicts in ``data`` are rendered as fenced JSON blocks.

    Examples:
        >>> tool_success("Archived vendor", data={"id": "009"})
        '✅ Archived vendor\\n**id:** 009'
    """
    parts = [f"✅ {message}"]

    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        parts.append(f"\n**Context:** {context_str}")

    if data:
        for key, value in data.items():
            parts.append(_format_value(key, value))

    return "".join(parts)


def tool_info(
    message: str,
    data: dict[str, Any] | None = None,
) -> str:
    """Create a standardized info response string with ℹ️ prefix."""
    parts = [f"ℹ️ {message}"]

    if data:
        for key, value in data.items():
            parts.append(_format_value(key, value))

    return "".join(parts)


# Common error codes for consistency
class ErrorCodes:
    """Standard error codes for tool responses."""

    # Authentication/Authorization
    AUTH_FAILED = "AUTH_FAILED"
    PERMISSION_DENIED = "PERMISSION_DENIED"

    # Configuration
    CONFIG_MISSING = "CONFIG_MISSING"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # Operation errors
    TIMEOUT = "TIMEOUT"
    RATE_LIMITED = "RATE_LIMITED"
    INVALID_INPUT = "INVALID_INPUT"

    # Remote API errors
    API_ERROR = "API_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Network errors
    CONNECTION_FAILED = "CONNECTION_FAILED"
