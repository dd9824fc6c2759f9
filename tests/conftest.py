"""Pytest configuration and shared fixtures."""

import os
import sys
from pathlib import Path

import httpx
import pytest

# Add project paths
PROJECT_ROOT = Path(__file__).parent.parent
TOOL_MODULES_DIR = PROJECT_ROOT / "tool_modules"
sys.path.insert(0, str(PROJECT_ROOT))

from tests.billcom_fakes import FakeBillcom, FakeServer  # noqa: E402
from tool_modules.aa_billcom.src.config import BillcomSettings  # noqa: E402
from tool_modules.aa_billcom.src.context import BillcomContext  # noqa: E402


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def personas_dir(project_root):
    """Return path to personas directory."""
    return project_root / "personas"


@pytest.fixture(autouse=True)
def setup_env():
    """Isolate environment variables; no real BILLCOM_* values leak into tests."""
    original_env = dict(os.environ)

    os.environ.setdefault("TESTING", "1")
    for name in list(os.environ):
        if name.startswith("BILLCOM_"):
            del os.environ[name]

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def settings():
    """Sandbox settings with a spend token."""
    return BillcomSettings(
        username="ap@example.com",
        password="secret",
        org_id="org123",
        dev_key="dev456",
        environment="sandbox",
        spend_api_token="spend-token",
    )


@pytest.fixture
def fake_billcom():
    """Recording fake for all three Bill.com APIs."""
    return FakeBillcom()


@pytest.fixture
async def billcom_context(settings, fake_billcom):
    """A real BillcomContext wired to the FakeBillcom transport."""
    context = BillcomContext.from_settings(settings, transport=httpx.MockTransport(fake_billcom))
    yield context
    await context.http.aclose()


@pytest.fixture
def fake_server():
    return FakeServer()
