"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- A fake model gateway (AsyncMock based, no network calls)
- Response factories for text / image / function-call answers
- Sample device registries
- Test client (FastAPI TestClient) with dependency overrides
"""

from typing import Generator, List
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.ai.providers.base import BinaryPart, FunctionCall, ModelGateway, NormalizedResponse
from app.core.credentials import SettingsCredentialProvider
from app.deps import get_credentials, get_device_registry, get_gateway
from app.schemas.device import Device, DeviceCategory, DeviceStatus
from app.services.device_registry import DeviceRegistry, default_devices


# ---------------------------------------------------------------------------
# RESPONSE FACTORIES
# ---------------------------------------------------------------------------

def text_response(text) -> NormalizedResponse:
    """Model answered with text only (text may be None)."""
    return NormalizedResponse(text=text, model="test-model")


def image_response(data: bytes = b"\x89PNG-fake", mime_type: str = "image/png", text=None) -> NormalizedResponse:
    """Model answered with one inline image."""
    return NormalizedResponse(
        text=text,
        binary_parts=[BinaryPart(mime_type=mime_type, data=data)],
        model="test-model",
    )


def call_response(*calls: dict, text=None) -> NormalizedResponse:
    """Model answered with control_device calls (one dict of args per call)."""
    return NormalizedResponse(
        text=text,
        function_calls=[FunctionCall(name="control_device", arguments=args) for args in calls],
        model="test-model",
    )


# ---------------------------------------------------------------------------
# GATEWAY FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def gateway() -> MagicMock:
    """
    Fake ModelGateway.

    Set `gateway.send.return_value` (or side_effect) per test.
    """
    fake = MagicMock(spec=ModelGateway)
    fake.send = AsyncMock(return_value=text_response("ok"))
    fake.submit_video_job = AsyncMock()
    fake.poll_video_job = AsyncMock()
    return fake


@pytest.fixture
def credentials() -> SettingsCredentialProvider:
    return SettingsCredentialProvider(api_key="test-key")


# ---------------------------------------------------------------------------
# DEVICE FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_devices() -> List[Device]:
    """The default simulated home (light, laptop, front door, thermostat)."""
    return default_devices()


@pytest.fixture
def two_devices() -> List[Device]:
    return [
        Device(id="1", name="Living Room Light", category=DeviceCategory.LIGHT,
               status=DeviceStatus.OFF, location="Living Room"),
        Device(id="2", name="Front Door", category=DeviceCategory.LOCK,
               status=DeviceStatus.LOCKED, location="Entrance"),
    ]


@pytest.fixture
def registry() -> DeviceRegistry:
    return DeviceRegistry()


# ---------------------------------------------------------------------------
# APP FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def client(gateway, credentials, registry) -> Generator[TestClient, None, None]:
    """
    Test client wired to the fake gateway and a fresh registry.
    """
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_credentials] = lambda: credentials
    app.dependency_overrides[get_device_registry] = lambda: registry

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
