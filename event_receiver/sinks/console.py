"""Console report sink."""
import sys
from typing import TextIO

from .base import ReportSink


class ConsoleSink(ReportSink):
    """Writes reports to a text stream, stdout by default."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    def emit(self, report: str) -> None:
        # Resolve lazily so redirected stdout (e.g. under pytest capsys) is honoured
        stream = self._stream or sys.stdout
        stream.write(report + "\n")
        stream.flush()
