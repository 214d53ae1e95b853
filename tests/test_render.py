"""Tests for the event report renderer."""
from datetime import datetime, timezone
import pytest
from event_receiver.codec import decode_event
from event_receiver.event_models import DataField, Event
from event_receiver.render import SEPARATOR, format_report, format_value, render_event


def test_separator_is_78_equals():
    """Test the report delimiter width."""
    assert SEPARATOR == "=" * 78


def test_report_without_location(event_payload, make_body):
    """Test a high importance event without location renders every field in order."""
    event = decode_event(make_body(event_payload))

    assert render_event(event) == [
        SEPARATOR,
        "imei:           356307042441013",
        "serial_no:      ",
        "message_type:   event",
        "timestamp:      2024-03-05 12:07:09",
        "gateway:        gw1.tracking.example.net",
        "code:           panic",
        "message:        Panic button pressed",
        "source:         Vehicle: ABC 123 GP [url: https://fleet.example.net/vehicles/17]",
        "importance:     high",
        "alert_level:    8",
        "color:          #FF0000",
        "state:          ",
        "ticket:         True",
        "device:         imei: 356307042441013 serialno:  [url: https://fleet.example.net/devices/9]",
        "data:           Speed: 82.5 [url: ]",
        "data:           Driver: J. Smith [url: ]",
        SEPARATOR,
    ]


def test_report_with_location(event_payload, make_body):
    """Test the location line sits between source and importance."""
    event_payload["location"] = {"latitude": -26.2041, "longitude": 28.0473, "address": "Johannesburg"}
    lines = render_event(decode_event(make_body(event_payload)))

    assert lines[8].startswith("source:")
    assert lines[9] == "location:       lat: -26.2041 lng: 28.0473 address: Johannesburg"
    assert lines[10].startswith("importance:")


def test_pools_are_not_rendered(event_payload, make_body):
    """Test internal pool tags stay out of the report."""
    report = format_report(decode_event(make_body(event_payload)))
    assert "control-room" not in report
    assert "pools" not in report


def test_data_lines_follow_array_order(event_payload, make_body):
    """Test one data line per entry, in array order."""
    lines = render_event(decode_event(make_body(event_payload)))
    data_lines = [line for line in lines if line.startswith("data:")]

    assert len(data_lines) == 2
    assert "Speed" in data_lines[0]
    assert "Driver" in data_lines[1]


def test_no_data_lines_for_empty_data(event_payload, make_body):
    """Test events without data fields end with the device line."""
    event_payload["data"] = []
    lines = render_event(decode_event(make_body(event_payload)))

    assert lines[-2].startswith("device:")
    assert lines[-1] == SEPARATOR


def test_render_is_idempotent(event_payload, make_body):
    """Test rendering the same event twice gives identical text."""
    event = decode_event(make_body(event_payload))
    assert format_report(event) == format_report(event)


@pytest.mark.parametrize(
    "timestamp,expected",
    [
        ("2024-03-05T14:07:09+02:00", "2024-03-05 12:07:09"),
        ("2024-12-31T20:30:00-05:00", "2025-01-01 01:30:00"),
        ("2024-03-05T14:07:09Z", "2024-03-05 14:07:09"),
        ("2024-03-05T14:07:09.750Z", "2024-03-05 14:07:09"),
    ],
)
def test_timestamp_normalized_to_utc(timestamp, expected, event_payload, make_body):
    """Test timestamps with any offset render as UTC clock time."""
    event_payload["timestamp"] = timestamp
    lines = render_event(decode_event(make_body(event_payload)))
    assert lines[4] == f"timestamp:      {expected}"


def test_naive_timestamp_treated_as_utc():
    """Test timestamps without offset are rendered unchanged."""
    event = Event(message_ver=1, message_type="event", valid=True, timestamp=datetime(2024, 3, 5, 9, 0, 0))
    assert render_event(event)[4] == "timestamp:      2024-03-05 09:00:00"


def test_ticket_false_and_empty_nested_defaults():
    """Test defaults render as empty values rather than failing."""
    event = Event(timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc))
    report = format_report(event)

    assert "ticket:         False" in report
    assert "source:         :  [url: ]" in report
    assert "device:         imei:  serialno:  [url: ]" in report


@pytest.mark.parametrize(
    "value,expected",
    [
        ("text", "text"),
        (12, "12"),
        (0.5, "0.5"),
        (True, "True"),
        (None, ""),
        ({"b": 1, "a": [1, "x"]}, '{"a":[1,"x"],"b":1}'),
        ([1, 2], "[1,2]"),
    ],
)
def test_format_value_variants(value, expected):
    """Test data value display for each variant."""
    assert format_value(value) == expected


def test_data_field_nested_value_line():
    """Test a nested data value renders as compact JSON."""
    event = Event(
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        data=[DataField(key="io", label="Inputs", value={"din1": True}, url="https://x.example/io")],
    )
    assert render_event(event)[-2] == 'data:           Inputs: {"din1":true} [url: https://x.example/io]'


def test_whole_degree_coordinates_have_no_fraction(event_payload, make_body):
    """Test whole-degree coordinates render without a trailing .0."""
    event_payload["location"] = {"latitude": 45.0, "longitude": -10, "address": ""}
    lines = render_event(decode_event(make_body(event_payload)))

    assert lines[9] == "location:       lat: 45 lng: -10 address: "
