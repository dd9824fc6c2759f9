"""Centralized Configuration Manager.

Provides thread-safe, cached access to config.json with automatic reload when
the file changes on disk (mtime check). config.json holds non-secret settings
only; Bill.com credentials come from the environment.

Usage:
    from server.config_manager import config

    billcom = config.get("billcom")
    lifetime = config.get_with_default("billcom", "session_lifetime_minutes")
    problems = config.validate()
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Project root (this file is at server/config_manager.py)
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_FILE = PROJECT_ROOT / "config.json"


# ==================== Config Validation ====================


# Schema for config sections and their expected types
# Format: {section: {key: type | (type, required, default)}}
CONFIG_SCHEMA: dict[str, dict[str, Any]] = {
    "billcom": {
        "environment": (str, False, "sandbox"),
        "session_lifetime_minutes": ((int, float), False, 30),
        "request_timeout": ((int, float), False, 30),
    },
    "agent": {
        "default_persona": (str, False, "billcom"),
    },
}

ALLOWED_VALUES: dict[tuple[str, str], tuple[str, ...]] = {
    ("billcom", "environment"): ("sandbox", "production"),
}


def _type_name(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__


def validate_config(config: dict[str, Any]) -> list[str]:
    """Validate config against schema. Unknown sections are ignored.

    Args:
        config: Config dict to validate

    Returns:
        List of validation error messages (empty if valid)
    """
    errors: list[str] = []

    for section, schema in CONFIG_SCHEMA.items():
        if section not in config:
            continue

        section_data = config[section]
        if not isinstance(section_data, dict):
            errors.append(f"Section '{section}' must be a dict, got {type(section_data).__name__}")
            continue

        for key, spec in schema.items():
            if isinstance(spec, tuple) and len(spec) == 3:
                expected_type, required, _default = spec
            else:
                expected_type, required = spec, False

            if key not in section_data:
                if required:
                    errors.append(f"Missing required key: {section}.{key}")
                continue

            value = section_data[key]
            # bool is an int subclass; never accept it for numeric settings
            if value is not None and (isinstance(value, bool) or not isinstance(value, expected_type)):
                errors.append(
                    f"Invalid type for {section}.{key}: expected {_type_name(expected_type)}, "
                    f"got {type(value).__name__}"
                )
                continue

            allowed = ALLOWED_VALUES.get((section, key))
            if allowed and value not in allowed:
                errors.append(f"Invalid value for {section}.{key}: '{value}' (expected one of {', '.join(allowed)})")

    return errors


class ConfigManager:
    """Thread-safe, cached configuration reader.

    Singleton pattern ensures one manager per process.

    Features:
    - Thread-safe: RLock protects all operations
    - Auto-reload: Detects external file changes via mtime
    """

    _instance: "ConfigManager | None" = None
    _instance_lock = threading.Lock()

    def __new__(cls) -> "ConfigManager":
        """Singleton pattern - one instance per process."""
        with cls._instance_lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._initialized = False
                cls._instance = instance
            return cls._instance

    def __init__(self):
        """Initialize the config manager (only runs once due to singleton)."""
        if getattr(self, "_initialized", False):
            return

        self._lock = threading.RLock()
        self._cache: dict[str, Any] = {}
        self._last_mtime: float = 0.0
        self._initialized = True

        self._load()

        logger.debug(f"ConfigManager initialized from {CONFIG_FILE}")

    def _load(self) -> None:
        """Load config from disk (internal, no lock)."""
        try:
            if CONFIG_FILE.exists():
                with open(CONFIG_FILE) as f:
                    self._cache = json.load(f)
                self._last_mtime = CONFIG_FILE.stat().st_mtime
                logger.debug(f"Config loaded, {len(self._cache)} sections")
            else:
                self._cache = {}
                self._last_mtime = 0.0
                logger.debug(f"Config file not found: {CONFIG_FILE}, using defaults")
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config.json: {e}")
            self._cache = {}
        except OSError as e:
            logger.error(f"Failed to read config.json: {e}")
            self._cache = {}

    def _check_reload(self) -> None:
        """Reload if the file was modified externally (internal, no lock)."""
        try:
            if CONFIG_FILE.exists():
                current_mtime = CONFIG_FILE.stat().st_mtime
                if current_mtime > self._last_mtime:
                    logger.info("Config file changed externally, reloading")
                    self._load()
        except OSError as e:
            logger.debug(f"Could not stat config.json: {e}")

    # ==================== Public API ====================

    def get(self, section: str, key: str | None = None, default: Any = None) -> Any:
        """Get a config value.

        Args:
            section: Top-level section name (e.g., "billcom")
            key: Optional key within section. If None, returns entire section.
            default: Default value if not found

        Examples:
            config.get("billcom")
            config.get("billcom", "environment", "sandbox")
        """
        with self._lock:
            self._check_reload()

            section_data = self._cache.get(section)
            if section_data is None:
                return default

            if key is None:
                return section_data

            if isinstance(section_data, dict):
                return section_data.get(key, default)

            return default

    def validate(self) -> list[str]:
        """Validate the current config against the schema.

        Returns:
            List of validation error messages (empty if valid)
        """
        with self._lock:
            self._check_reload()
            return validate_config(self._cache)

    def get_with_default(self, section: str, key: str) -> Any:
        """Get a config value, falling back to schema default.

        Returns:
            Config value, schema default, or None
        """
        with self._lock:
            self._check_reload()

            section_data = self._cache.get(section, {})
            if isinstance(section_data, dict) and key in section_data:
                return section_data[key]

            schema = CONFIG_SCHEMA.get(section, {})
            spec = schema.get(key)
            if isinstance(spec, tuple) and len(spec) >= 3:
                return spec[2]

            return None


# Global singleton instance for convenient access
config = ConfigManager()
