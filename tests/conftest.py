"""
Pytest configuration and shared fixtures.

This file adds the parent directory to the Python path so that tests can import
from the domain, repositories, services and api modules, and pins the
environment to the in-memory offer store so no test ever reaches Supabase.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ["OFFER_STORE"] = "memory"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["HR_EMAIL"] = "hr@example.com"
os.environ["HR_PASSWORD"] = "hr-password"
os.environ["HOST_URL"] = "https://offers.example.com"
os.environ.pop("SMTP_HOST", None)

from domain.hr import HRIdentity  # noqa: E402
from repositories.memory_offer_repository import InMemoryOfferRepository  # noqa: E402
from services.access_gateway import AccessGateway  # noqa: E402
from services.notification_service import OfferNotification  # noqa: E402
from services.offer_lifecycle_service import OfferLifecycleService  # noqa: E402

FIXED_NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class RecordingDispatcher:
    """Dispatcher double that records notifications instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[OfferNotification] = []

    def dispatch(self, notification: OfferNotification) -> None:
        self.sent.append(notification)


@pytest.fixture()
def repository() -> InMemoryOfferRepository:
    return InMemoryOfferRepository()


@pytest.fixture()
def service(repository: InMemoryOfferRepository) -> OfferLifecycleService:
    return OfferLifecycleService(repository, clock=lambda: FIXED_NOW)


@pytest.fixture()
def hr_identity() -> HRIdentity:
    return HRIdentity(email="hr@example.com", expires_at=FIXED_NOW + timedelta(hours=1))


@pytest.fixture()
def gateway() -> AccessGateway:
    return AccessGateway(
        secret="test-session-secret",
        hr_email="hr@example.com",
        hr_password="hr-password",
        session_ttl=timedelta(hours=1),
    )


@pytest.fixture()
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture()
def test_client(
    repository: InMemoryOfferRepository,
    gateway: AccessGateway,
    dispatcher: RecordingDispatcher,
) -> Generator:
    """Provide a FastAPI TestClient wired to the in-memory store."""
    from fastapi.testclient import TestClient

    from api.dependencies import get_access_gateway, get_offer_dispatcher, get_offer_repository
    from api.main import app

    app.dependency_overrides[get_offer_repository] = lambda: repository
    app.dependency_overrides[get_access_gateway] = lambda: gateway
    app.dependency_overrides[get_offer_dispatcher] = lambda: dispatcher
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def hr_headers(gateway: AccessGateway) -> dict[str, str]:
    return {"Authorization": f"Bearer {gateway.login('hr@example.com', 'hr-password')}"}
