"""Shared fixtures for receiver tests."""
import copy
import pytest
import orjson
from event_receiver.config import Settings


SAMPLE_EVENT = {
    "message_ver": 1,
    "message_type": "event",
    "valid": True,
    "timestamp": "2024-03-05T14:07:09+02:00",
    "gateway": "gw1.tracking.example.net",
    "code": "panic",
    "message": "Panic button pressed",
    "port": 5027,
    "transmission": "tcp",
    "importance": "high",
    "alert_level": 8,
    "color": "#FF0000",
    "state": "",
    "ticket": True,
    "source": {
        "key": "veh_reg",
        "label": "Vehicle",
        "value": "ABC 123 GP",
        "url": "https://fleet.example.net/vehicles/17",
    },
    "device": {
        "identifier": "imei",
        "imei": "356307042441013",
        "serial_no": "",
        "firm_ver": "1.04",
        "type": "teltonika",
        "model": "FMB920",
        "url": "https://fleet.example.net/devices/9",
    },
    "data": [
        {"key": "speed", "label": "Speed", "value": 82.5, "url": ""},
        {"key": "driver", "label": "Driver", "value": "J. Smith", "url": None},
    ],
    "pools": ["alerts", "control-room"],
}


@pytest.fixture
def event_payload():
    """A fresh copy of a full event message without location."""
    return copy.deepcopy(SAMPLE_EVENT)


@pytest.fixture
def make_body():
    """Encode a message dict as wire bytes."""
    def _make(payload):
        return orjson.dumps(payload)
    return _make


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)
