"""Bill.com connection settings.

Secrets are read from the environment (after loading a local ``.env`` file with
python-dotenv). Non-secret tuning comes from the ``billcom`` section of
config.json; environment variables win when both are set.

    BILLCOM_USERNAME, BILLCOM_PASSWORD, BILLCOM_ORG_ID, BILLCOM_DEV_KEY  (required)
    BILLCOM_ENVIRONMENT       sandbox | production (default: sandbox)
    BILLCOM_SPEND_API_TOKEN   optional, enables the Spend & Expense tools
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from dotenv import load_dotenv

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

PRODUCTION = "production"
SANDBOX = "sandbox"
ENVIRONMENTS = (PRODUCTION, SANDBOX)

LEGACY_BASE_URLS = {
    PRODUCTION: "https://api.bill.com/api/v2",
    SANDBOX: "https://api-sandbox.bill.com/api/v2",
}

GATEWAY_BASE_URLS = {
    PRODUCTION: "https://gateway.bill.com/connect/v3",
    SANDBOX: "https://gateway.stage.bill.com/connect/v3",
}

SPEND_BASE_URLS = {
    PRODUCTION: "https://gateway.prod.bill.com/connect/v3/spend",
    SANDBOX: "https://gateway.stage.bill.com/connect/v3/spend",
}

# The remote side expires sessions after 35 minutes of inactivity.
DEFAULT_SESSION_LIFETIME_MINUTES = 30
DEFAULT_REQUEST_TIMEOUT = 30.0

REQUIRED_ENV_VARS = (
    "BILLCOM_USERNAME",
    "BILLCOM_PASSWORD",
    "BILLCOM_ORG_ID",
    "BILLCOM_DEV_KEY",
)


@dataclass(frozen=True)
class BillcomSettings:
    """Credentials and tuning for one Bill.com organisation."""

    username: str
    password: str
    org_id: str
    dev_key: str
    environment: str = SANDBOX
    spend_api_token: str | None = None
    session_lifetime: float = DEFAULT_SESSION_LIFETIME_MINUTES * 60
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self):
        if self.environment not in ENVIRONMENTS:
            raise ConfigurationError(
                f"BILLCOM_ENVIRONMENT must be one of {', '.join(ENVIRONMENTS)}, got '{self.environment}'"
            )
        if self.session_lifetime <= 0:
            raise ConfigurationError("billcom.session_lifetime_minutes must be positive")

    @property
    def legacy_base_url(self) -> str:
        return LEGACY_BASE_URLS[self.environment]

    @property
    def gateway_base_url(self) -> str:
        return GATEWAY_BASE_URLS[self.environment]

    @property
    def spend_base_url(self) -> str:
        return SPEND_BASE_URLS[self.environment]

    def __repr__(self) -> str:
        return (
            f"BillcomSettings(username={self.username!r}, org_id={self.org_id!r}, "
            f"environment={self.environment!r}, spend_configured={bool(self.spend_api_token)})"
        )


def _read_section() -> dict[str, Any]:
    from server.utils import get_section_config

    return get_section_config("billcom")


def load_settings(
    env: Mapping[str, str] | None = None,
    section: Mapping[str, Any] | None = None,
) -> BillcomSettings:
    """Build settings from environment variables and config.json.

    Args:
        env: Environment mapping (default: ``os.environ`` after loading ``.env``)
        section: The ``billcom`` config section (default: read from config.json)

    Raises:
        ConfigurationError: If a required variable is missing or a value is invalid
    """
    if env is None:
        load_dotenv()
        env = os.environ
    if section is None:
        section = _read_section()

    missing = [name for name in REQUIRED_ENV_VARS if not env.get(name)]
    if missing:
        raise ConfigurationError(f"{', '.join(missing)} must be set in environment variables")

    environment = env.get("BILLCOM_ENVIRONMENT") or section.get("environment") or SANDBOX

    try:
        lifetime_minutes = float(section.get("session_lifetime_minutes", DEFAULT_SESSION_LIFETIME_MINUTES))
        timeout = float(section.get("request_timeout", DEFAULT_REQUEST_TIMEOUT))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid billcom config value: {e}") from e

    settings = BillcomSettings(
        username=env["BILLCOM_USERNAME"],
        password=env["BILLCOM_PASSWORD"],
        org_id=env["BILLCOM_ORG_ID"],
        dev_key=env["BILLCOM_DEV_KEY"],
        environment=environment.strip().lower(),
        spend_api_token=env.get("BILLCOM_SPEND_API_TOKEN") or None,
        session_lifetime=lifetime_minutes * 60,
        request_timeout=timeout,
    )
    logger.debug(f"Loaded Bill.com settings: {settings!r}")
    return settings
