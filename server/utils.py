"""Shared utilities for MCP tool modules.

Output formatting helpers and config.json access used across tool modules.
"""

import json
import logging
from typing import Any, cast

from server.config_manager import config as _config_manager

logger = logging.getLogger(__name__)


# ==================== Output Formatting ====================


def truncate_output(
    text: str,
    max_length: int = 5000,
    suffix: str = "\n\n... (truncated)",
) -> str:
    """Truncate long output, keeping the head and appending a suffix message.

    Args:
        text: Text to potentially truncate
        max_length: Maximum length before truncation (default: 5000)
        suffix: Message to append when truncated

    Returns:
        Original text if within limit, otherwise truncated with message
    """
    if not text or len(text) <= max_length:
        return text

    return text[:max_length] + suffix


def format_json(value: Any, max_length: int = 20000) -> str:
    """Render a value as a fenced JSON block, truncated if very long."""
    text = json.dumps(value, indent=2, default=str)
    return f"```json\n{truncate_output(text, max_length=max_length)}\n```"


# ==================== Config Loading ====================


def get_section_config(section: str, default: dict | None = None) -> dict:
    """Get a specific section from config.json.

    Args:
        section: Config section name (e.g., 'billcom')
        default: Default value if section not found

    Returns:
        Config section dictionary
    """
    result = _config_manager.get(section)
    if not isinstance(result, dict):
        return default or {}
    return cast(dict, result)
