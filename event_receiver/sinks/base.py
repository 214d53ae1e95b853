"""Base interface for report sinks."""
from abc import ABC, abstractmethod


class ReportSink(ABC):
    """Destination for rendered event reports."""

    @abstractmethod
    def emit(self, report: str) -> None:
        """
        Write one rendered report.

        Args:
            report: Multi-line report text, without trailing newline
        """
        pass
