# tests/conftest.py
from __future__ import annotations

import os
from pathlib import Path
from typing import List
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

# ---------- Paths & .env ----------
ROOT = Path(__file__).resolve().parents[1]  # repo root
env_path = ROOT / ".env"
if env_path.exists():
    from dotenv import load_dotenv

    load_dotenv(dotenv_path=env_path, override=False)

from authgateway.app.core.config import CognitoSettings, Settings  # noqa: E402
from authgateway.app.main import create_app  # noqa: E402
from authgateway.app.queue.helper import QueueHelper  # noqa: E402
from authgateway.app.repositories.auth import AuthRepository  # noqa: E402
from authgateway.app.services.cognito import CognitoService  # noqa: E402

# Opt-in switch for tests against a real broker
ENABLE_BROKER_TESTS = (os.getenv("ENABLE_BROKER_TESTS", "")).lower() in ("1", "true", "yes", "on")


# ---------- Pytest controls ----------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "broker: tests that need a live AMQP broker (skipped by default)")


def pytest_collection_modifyitems(config: pytest.Config, items: List[pytest.Item]) -> None:
    if ENABLE_BROKER_TESTS:
        return
    skip_broker = pytest.mark.skip(
        reason="Skipping @broker tests. Set ENABLE_BROKER_TESTS=true and AMAZON_MQ_* to run them."
    )
    for item in items:
        if "broker" in item.keywords:
            item.add_marker(skip_broker)


# ---------- Fakes ----------
TOKENS = {
    "AccessToken": "access-token",
    "IdToken": "id-token",
    "RefreshToken": "refresh-token",
}


@pytest.fixture
def identity() -> AsyncMock:
    fake = AsyncMock(spec=CognitoService)
    fake.sign_in.return_value = {"AuthenticationResult": dict(TOKENS)}
    fake.sign_up.return_value = {"UserSub": "sub-123", "UserConfirmed": False}
    fake.confirm_sign_up.return_value = True
    fake.resend_confirmation_code.return_value = {
        "CodeDeliveryDetails": {"DeliveryMedium": "EMAIL", "Destination": "j***@gmail.com"}
    }
    fake.forgot_password.return_value = {
        "CodeDeliveryDetails": {"DeliveryMedium": "SMS", "Destination": "+55***99"}
    }
    fake.confirm_forgot_password.return_value = True
    return fake


@pytest.fixture
def repository() -> AsyncMock:
    return AsyncMock(spec=AuthRepository)


@pytest.fixture
def queue() -> Mock:
    fake = Mock(spec=QueueHelper)
    fake.is_connected = True
    fake.ensure_initialized = AsyncMock()
    fake.send_user_signup_message = AsyncMock()
    fake.send_user_login_message = AsyncMock()
    fake.disconnect = AsyncMock()
    return fake


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        cognito=CognitoSettings(client_id="client-id", client_secret="client-secret"),
    )


@pytest.fixture
def app(settings, identity, repository, queue):
    return create_app(settings, identity=identity, repository=repository, queue=queue)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
