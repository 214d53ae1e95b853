"""Wire codec for universal messages.

Decoding is two-staged: the envelope is sniffed leniently first, and only
messages passing the acceptance predicate are re-parsed strictly as a full
event.
"""
import orjson
from pydantic import ValidationError

from .errors import DecodeError
from .event_models import Envelope, Event


def _describe(exc: ValidationError) -> str:
    """Condense a validation error into a single log-friendly line."""
    parts = []
    for err in exc.errors(include_url=False):
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def decode_envelope(raw: bytes) -> Envelope:
    """
    Parse raw message bytes into the generic envelope.

    Missing or null fields take their zero values; only bytes that are not a JSON
    object, or fields that cannot be coerced, fail.

    Args:
        raw: Message body

    Returns:
        The sniffed envelope

    Raises:
        DecodeError: If the bytes are not a structured record
    """
    try:
        return Envelope.model_validate_json(raw)
    except ValidationError as e:
        raise DecodeError("envelope", _describe(e)) from e


def decode_event(raw: bytes) -> Event:
    """
    Parse raw message bytes into a full event.

    Scalars are validated strictly, with null read as absent; unknown keys
    are ignored and a missing
    or null location decodes to None.

    Args:
        raw: Message body whose envelope passed the acceptance predicate

    Returns:
        The decoded event

    Raises:
        DecodeError: If the bytes do not match the event shape
    """
    try:
        return Event.model_validate_json(raw, strict=True)
    except ValidationError as e:
        raise DecodeError("event", _describe(e)) from e


def encode_event(event: Event) -> bytes:
    """Serialize an event to wire JSON, omitting an absent location."""
    payload = event.model_dump(mode="json", by_alias=True)
    if payload.get("location") is None:
        payload.pop("location", None)
    return orjson.dumps(payload)
