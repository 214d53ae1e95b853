from .base import ReportSink
from .console import ConsoleSink
from .memory import InMemorySink

__all__ = ["ReportSink", "ConsoleSink", "InMemorySink"]
