"""Shared fixtures: settings factory, recording mail backend and an ASGI client."""
from __future__ import annotations

from typing import Any, ClassVar

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from reservation_mailer.app.core.config import Settings, get_settings
from reservation_mailer.app.main import app
from reservation_mailer.app.routers.reservations import get_backend_builder
from reservation_mailer.app.services.mail.base import OutgoingEmail


class RecordingBackend:
    """In-memory backend; ``failures`` maps a call index to the exception to raise."""

    name: ClassVar[str] = "recording"
    checks_email_shape: ClassVar[bool] = True

    def __init__(self, failures: dict[int, Exception] | None = None) -> None:
        self.failures = failures or {}
        self.attempts: list[OutgoingEmail] = []
        self.sent: list[OutgoingEmail] = []

    async def send(self, message: OutgoingEmail) -> None:
        index = len(self.attempts)
        self.attempts.append(message)
        if index in self.failures:
            raise self.failures[index]
        self.sent.append(message)


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "RESTAURANT_EMAIL": "bookings@bistro.example",
        "EMAIL_BACKEND": "smtp",
        "EMAIL_SERVICE": "gmail",
        "EMAIL_PASSWORD": "app-password",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def reservation_payload() -> dict[str, str]:
    return {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "555-1234",
        "date": "2024-03-01",
        "time": "19:00",
        "guests": "2",
        "message": "Window seat please",
    }


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def configure_app(backend):
    """Install settings and a backend builder on the app for one test."""

    built_for: list = []

    def _configure(settings: Settings | None = None, mail_backend: Any = None) -> list:
        active = settings or make_settings()
        chosen = mail_backend or backend

        def _builder(config):
            built_for.append(config)
            return chosen

        app.dependency_overrides[get_settings] = lambda: active
        app.dependency_overrides[get_backend_builder] = lambda: _builder
        return built_for

    yield _configure
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client() -> AsyncClient:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def backend_factory():
    return RecordingBackend
