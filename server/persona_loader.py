"""Tool module discovery and persona configs.

A persona is a YAML file under ``personas/`` naming the tool modules to load:

    name: accounts_payable
    description: Vendors, bills and approvals
    tools:
      - billcom_basic
      - billcom_extra
"""

import logging
from typing import Any, cast

import yaml

from .tool_paths import (
    PROJECT_DIR,
    TOOL_MODULES_DIR,
    TOOLS_BASIC_FILE,
    TOOLS_CORE_FILE,
    TOOLS_EXTRA_FILE,
)

logger = logging.getLogger(__name__)

PERSONAS_DIR = PROJECT_DIR / "personas"


def discover_tool_modules() -> set[str]:
    """
    Discover available tool modules from the tool_modules directory.

    Scans for:
    - Base modules: aa_*/src/tools_core.py or aa_*/src/tools_basic.py
    - Core variants: aa_*/src/tools_core.py -> module_core
    - Basic variants: aa_*/src/tools_basic.py -> module_basic
    - Extra variants: aa_*/src/tools_extra.py -> module_extra

    Returns:
        Set of available module names (e.g., {'billcom', 'billcom_basic', 'billcom_extra', ...})
    """
    modules: set[str] = set()

    if not TOOL_MODULES_DIR.exists():
        logger.warning(f"Tool modules directory not found: {TOOL_MODULES_DIR}")
        return modules

    for module_dir in TOOL_MODULES_DIR.iterdir():
        if not module_dir.is_dir() or not module_dir.name.startswith("aa_"):
            continue

        base_name = module_dir.name[3:]  # Remove "aa_" prefix
        src_dir = module_dir / "src"

        if not src_dir.exists():
            continue

        tools_core_py = src_dir / TOOLS_CORE_FILE
        tools_basic_py = src_dir / TOOLS_BASIC_FILE
        tools_extra_py = src_dir / TOOLS_EXTRA_FILE

        if tools_core_py.exists() or tools_basic_py.exists():
            modules.add(base_name)

        if tools_core_py.exists():
            modules.add(f"{base_name}_core")

        if tools_basic_py.exists():
            modules.add(f"{base_name}_basic")

        if tools_extra_py.exists():
            modules.add(f"{base_name}_extra")

    logger.debug(f"Discovered {len(modules)} tool modules: {sorted(modules)}")
    return modules


# Discovered tool modules (cached on first access)
_discovered_modules: set[str] | None = None


def get_available_modules() -> set[str]:
    """Get available tool modules, discovering them if needed."""
    global _discovered_modules
    if _discovered_modules is None:
        _discovered_modules = discover_tool_modules()
    return _discovered_modules


def is_valid_module(module_name: str) -> bool:
    """Check if a module name is valid (exists in tool_modules)."""
    return module_name in get_available_modules()


def list_personas() -> list[str]:
    """Names of persona files in the personas directory."""
    if not PERSONAS_DIR.exists():
        return []
    return sorted(p.stem for p in PERSONAS_DIR.glob("*.yaml"))


def load_persona_config(persona_name: str) -> dict[str, Any] | None:
    """Load a persona YAML file. Returns None if missing or unreadable."""
    persona_file = PERSONAS_DIR / f"{persona_name}.yaml"
    if not persona_file.exists():
        return None

    try:
        with open(persona_file) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to read persona {persona_name}: {e}")
        return None

    if not isinstance(data, dict):
        logger.error(f"Persona {persona_name} must be a mapping, got {type(data).__name__}")
        return None
    return cast(dict[str, Any], data)


def load_persona_tools(persona_name: str) -> list[str] | None:
    """Tool module names listed by a persona, or None if the persona does not exist."""
    data = load_persona_config(persona_name)
    if data is None:
        return None
    return [str(t) for t in data.get("tools", []) or []]
