"""In-memory report sink."""
from typing import Iterable

from .base import ReportSink


class InMemorySink(ReportSink):
    """Keeps emitted reports in order of emission."""

    def __init__(self):
        self._reports: list[str] = []

    def emit(self, report: str) -> None:
        self._reports.append(report)

    def list_recent(self, limit: int = 50) -> Iterable[str]:
        """List reports newest first."""
        return list(reversed(self._reports))[:limit]

    def __len__(self) -> int:
        return len(self._reports)
