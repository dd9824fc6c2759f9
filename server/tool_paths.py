"""Tool Path Resolution - Shared utilities for tool module path resolution.

Maps a tool module name to its tools file and importable dotted path.

Usage:
    from server.tool_paths import get_tools_file_path, get_tools_import_path

    get_tools_file_path("billcom_basic")    # aa_billcom/src/tools_basic.py
    get_tools_import_path("billcom_extra")  # tool_modules.aa_billcom.src.tools_extra
"""

from pathlib import Path

# Directory structure:
# project/
#   server/         <- This file is here
#     tool_paths.py
#   tool_modules/   <- Tool modules are here
#     aa_billcom/
#     aa_billcom_spend/
PROJECT_DIR = Path(__file__).parent.parent
TOOL_MODULES_DIR = PROJECT_DIR / "tool_modules"

# Tool file naming conventions
TOOLS_CORE_FILE = "tools_core.py"
TOOLS_BASIC_FILE = "tools_basic.py"
TOOLS_EXTRA_FILE = "tools_extra.py"

SUFFIX_FILES = {
    "_core": TOOLS_CORE_FILE,
    "_basic": TOOLS_BASIC_FILE,
    "_extra": TOOLS_EXTRA_FILE,
}


def split_module_name(module_name: str) -> tuple[str, str]:
    """Split a module name into (base name, tools file name).

    - billcom_basic -> ("billcom", "tools_basic.py")
    - billcom_extra -> ("billcom", "tools_extra.py")
    - billcom_spend -> ("billcom_spend", tools_core.py or tools_basic.py, whichever exists)
    """
    for suffix, file_name in SUFFIX_FILES.items():
        if module_name.endswith(suffix):
            return module_name[: -len(suffix)], file_name

    src_dir = TOOL_MODULES_DIR / f"aa_{module_name}" / "src"
    if (src_dir / TOOLS_CORE_FILE).exists():
        return module_name, TOOLS_CORE_FILE
    return module_name, TOOLS_BASIC_FILE


def get_tools_file_path(module_name: str) -> Path:
    """
    Determine the tools file path for a tool module name.

    Args:
        module_name: Tool module name (e.g., "billcom", "billcom_basic", "billcom_extra")

    Returns:
        Path to the tools file
    """
    base_name, file_name = split_module_name(module_name)
    return TOOL_MODULES_DIR / f"aa_{base_name}" / "src" / file_name


def get_tools_import_path(module_name: str) -> str:
    """Dotted import path of the tools file for ``module_name``."""
    base_name, file_name = split_module_name(module_name)
    return f"tool_modules.aa_{base_name}.src.{file_name[:-3]}"


def get_module_dir(module_name: str) -> Path:
    """
    Get the directory for a tool module.

    Args:
        module_name: Module name, with or without a _core/_basic/_extra suffix

    Returns:
        Path to the module directory (e.g., tool_modules/aa_billcom)
    """
    base_name = module_name
    for suffix in SUFFIX_FILES:
        if module_name.endswith(suffix):
            base_name = module_name[: -len(suffix)]
            break
    return TOOL_MODULES_DIR / f"aa_{base_name}"
