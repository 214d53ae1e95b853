"""Tests for report sinks."""
import io
from event_receiver.sinks.console import ConsoleSink
from event_receiver.sinks.memory import InMemorySink


def test_console_sink_writes_report_with_newline():
    """Test console sink terminates each report with a newline."""
    stream = io.StringIO()
    sink = ConsoleSink(stream)

    sink.emit("line one\nline two")
    sink.emit("next")

    assert stream.getvalue() == "line one\nline two\nnext\n"


def test_console_sink_defaults_to_stdout(capsys):
    """Test console sink writes to the current stdout."""
    ConsoleSink().emit("report")
    assert capsys.readouterr().out == "report\n"


def test_memory_sink_lists_newest_first():
    """Test in-memory sink ordering and limit."""
    sink = InMemorySink()
    for i in range(5):
        sink.emit(f"report {i}")

    assert len(sink) == 5
    assert list(sink.list_recent(limit=2)) == ["report 4", "report 3"]
