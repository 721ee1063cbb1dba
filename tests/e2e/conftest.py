"""Fixtures for end-to-end tests against a running AgentGate server.

Set ``AGENTGATE_E2E_BASE_URL`` (e.g. ``http://localhost:8000``) to enable;
every test in this directory is skipped otherwise.
"""

import json
import os
from pathlib import Path

import httpx
import pytest

AUTH_FILE = Path(__file__).parent / ".auth" / "user.json"

DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_PASSWORD = "password123"


@pytest.fixture(scope="session")
def base_url() -> str:
    url = os.environ.get("AGENTGATE_E2E_BASE_URL")
    if not url:
        pytest.skip("AGENTGATE_E2E_BASE_URL not set")
    return url.rstrip("/")


@pytest.fixture(scope="session")
def admin_credentials() -> dict[str, str]:
    return {
        "email": os.environ.get("AGENTGATE_ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL),
        "password": os.environ.get("AGENTGATE_ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
    }


@pytest.fixture
async def client(base_url):
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as c:
        yield c


@pytest.fixture
def save_auth_state():
    def _save(tokens: dict) -> None:
        AUTH_FILE.parent.mkdir(parents=True, exist_ok=True)
        AUTH_FILE.write_text(json.dumps(tokens, indent=2))

    return _save


@pytest.fixture
def stored_auth() -> dict:
    """Token state written by the auth setup test."""
    if not AUTH_FILE.exists():
        pytest.skip(f"{AUTH_FILE} missing; run test_auth_setup.py first")
    return json.loads(AUTH_FILE.read_text())
