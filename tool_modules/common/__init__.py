"""Common utilities for tool modules.

Makes the ``server`` package importable from tool modules regardless of how
they are loaded.

Usage in tool modules:
    from tool_modules.common import PROJECT_ROOT  # Sets up sys.path

    from server.tool_registry import ToolRegistry
"""

import sys
from pathlib import Path

# This file is at: tool_modules/common/__init__.py
# Project root is 2 levels up
PROJECT_ROOT = Path(__file__).parent.parent.parent

PROJECT_ROOT_STR = str(PROJECT_ROOT)


def setup_path() -> None:
    """Add project root to sys.path if not already present."""
    if PROJECT_ROOT_STR not in sys.path:
        sys.path.insert(0, PROJECT_ROOT_STR)


# Auto-setup path on import so tool modules can just do:
# from tool_modules.common import PROJECT_ROOT
setup_path()
