"""Receiver error hierarchy."""
from typing import Literal


class ReceiverError(Exception):
    """Base exception for receiver failures."""
    pass


class DecodeError(ReceiverError):
    """Raised when message bytes cannot be decoded at a given stage."""

    def __init__(self, stage: Literal["envelope", "event"], detail: str):
        self.stage = stage
        self.detail = detail
        super().__init__(f"{stage} decode failed: {detail}")


class TransportError(ReceiverError):
    """Raised when the broker connection or channel fails. Fatal to the process."""
    pass
