"""Fixed-layout text report for decoded events."""
from datetime import timezone
from typing import Any

import orjson

from .event_models import Event

SEPARATOR = "=" * 78
LABEL_WIDTH = 16
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_value(value: Any) -> str:
    """Render a scalar or nested data value for display."""
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return orjson.dumps(value, option=orjson.OPT_SORT_KEYS).decode()
    return str(value)


def format_timestamp(event: Event) -> str:
    """Format the event time as UTC clock time; naive timestamps are taken as UTC."""
    ts = event.timestamp
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def format_coordinate(value: float) -> str:
    """Render a coordinate without a trailing ``.0`` for whole degrees."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _line(label: str, value: Any) -> str:
    return f"{label + ':':<{LABEL_WIDTH}}{format_value(value)}"


def _with_url(label: Any, value: Any, url: str | None) -> str:
    return f"{format_value(label)}: {format_value(value)} [url: {format_value(url)}]"


def render_event(event: Event) -> list[str]:
    """
    Render an event as report lines, bracketed by separators.

    Pools are internal routing tags and are not rendered.

    Args:
        event: Decoded event

    Returns:
        Ordered report lines
    """
    device = event.device
    lines = [
        SEPARATOR,
        _line("imei", device.imei),
        _line("serial_no", device.serial_no),
        _line("message_type", event.type),
        _line("timestamp", format_timestamp(event)),
        _line("gateway", event.gateway),
        _line("code", event.code),
        _line("message", event.message),
        _line("source", _with_url(event.source.label, event.source.value, event.source.url)),
    ]

    if event.location is not None:
        loc = event.location
        lat, lng = format_coordinate(loc.latitude), format_coordinate(loc.longitude)
        lines.append(_line("location", f"lat: {lat} lng: {lng} address: {loc.address}"))

    lines += [
        _line("importance", event.importance),
        _line("alert_level", event.alert_level),
        _line("color", event.color),
        _line("state", event.state),
        _line("ticket", event.ticket),
        _line(
            "device",
            f"imei: {device.imei} serialno: {device.serial_no} [url: {format_value(device.url)}]",
        ),
    ]

    for field in event.data:
        lines.append(_line("data", _with_url(field.label, field.value, field.url)))

    lines.append(SEPARATOR)
    return lines


def format_report(event: Event) -> str:
    """Render an event as a single multi-line report."""
    return "\n".join(render_event(event))
