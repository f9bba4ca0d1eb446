"""Test fixtures for speakerctrl tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from unittest.mock import AsyncMock, Mock

import pytest

from speakerctrl.api.client import SpeakerApiClient
from speakerctrl.api.protocol import HttpResponse
from speakerctrl.core.coordinator import CommandCoordinator
from speakerctrl.models.device import Device


def _speaker_records() -> list[dict[str, object]]:
    """Return a GET /speakers payload as the backend sends it."""
    return [
        {
            "name": "Living Room",
            "ip": "192.168.1.20",
            "port": 55001,
            "mac": "AA:BB:CC:DD:EE:01",
            "model": "HW-Q90R",
            "groupName": "Downstairs",
        },
        {
            "name": "Kitchen",
            "ip": "192.168.1.21",
            "port": 55001,
            "mac": "AA:BB:CC:DD:EE:02",
            "groupName": "Downstairs",
        },
        {
            "name": "Bedroom",
            "ip": "192.168.1.22",
            "port": 55001,
            "mac": "AA:BB:CC:DD:EE:03",
        },
    ]


@pytest.fixture
def speaker_records() -> list[dict[str, object]]:
    """Return a raw speaker directory payload."""
    return _speaker_records()


@pytest.fixture
def sample_devices() -> list[Device]:
    """Return the sample directory as Device models."""
    return [Device.from_dict(r) for r in _speaker_records()]


@pytest.fixture
def mock_client(sample_devices: list[Device]) -> Mock:
    """Create a mock API client answering every call successfully."""
    client = Mock(spec=SpeakerApiClient)
    client.get_speakers = AsyncMock(return_value=sample_devices)
    client.add_speaker = AsyncMock(
        return_value=Device(name="Office", ip="192.168.1.30", port=55001)
    )
    client.create_group = AsyncMock(return_value="OK")
    client.ungroup = AsyncMock(return_value="Ungrouped")
    client.check_status = AsyncMock(return_value=HttpResponse(404, "Not Found"))
    return client


@pytest.fixture
def coordinator(mock_client: Mock) -> CommandCoordinator:
    """Create a coordinator with a short reconciliation delay."""
    return CommandCoordinator(mock_client, reconciliation_delay=0.01)
