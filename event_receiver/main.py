"""
Event Receiver - universal event message consumer.

Subscribes to a RabbitMQ queue bound to the event exchange, renders every
valid version 1 event as a text report on stdout and acknowledges it.

Commands:
- consume: run against the broker until interrupted (default)
- decode: replay JSON message files through the same pipeline

Run:
    python -m event_receiver [consume]
    python -m event_receiver decode sample.json
"""
import argparse
import signal
import sys
from typing import Sequence

from . import __version__
from .adapters.memory import InMemorySource
from .adapters.rabbitmq import RabbitMQSource
from .config import Settings, get_settings
from .dispatcher import Dispatcher, Outcome
from .errors import TransportError
from .health import HealthChecker
from .logging import setup_logging, get_logger
from .metrics import Metrics
from .ops import OpsServer, create_ops_app
from .sinks.base import ReportSink
from .sinks.console import ConsoleSink

logger = get_logger()


def consume(settings: Settings, sink: ReportSink | None = None) -> int:
    """
    Consume from the broker until interrupted.

    Args:
        settings: Static configuration
        sink: Report destination (defaults to stdout)

    Returns:
        Process exit status
    """
    metrics = Metrics(service_name="event-receiver", version=__version__)
    source = RabbitMQSource(settings)
    dispatcher = Dispatcher(settings, source, sink if sink is not None else ConsoleSink(), metrics=metrics)

    ops = None
    if settings.OPS_ENABLED:
        health_checker = HealthChecker(source, service_name="event-receiver", version=__version__)
        ops = OpsServer(create_ops_app(health_checker, metrics), port=settings.OPS_PORT)
        ops.start()

    previous_handler = signal.signal(signal.SIGTERM, lambda signum, frame: dispatcher.stop())

    logger.info(
        "service_starting",
        version=__version__,
        env=settings.ENV,
        host=settings.AMQP_HOST,
        port=settings.AMQP_PORT,
        vhost=settings.AMQP_VHOST,
    )
    try:
        source.connect()
        dispatcher.run()
    except TransportError as e:
        logger.error("service_transport_failed", error=str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("service_interrupted")
    finally:
        signal.signal(signal.SIGTERM, previous_handler)
        source.close()
        metrics.mark_down()
        if ops is not None:
            ops.stop()
        logger.info("service_stopping", **dispatcher.stats)
    return 0


def decode(settings: Settings, paths: Sequence[str], sink: ReportSink | None = None) -> int:
    """
    Replay message files through the dispatch pipeline.

    Args:
        settings: Static configuration
        paths: JSON files, one message each
        sink: Report destination (defaults to stdout)

    Returns:
        0 if every file rendered an event, 1 otherwise, 2 if a file is unreadable
    """
    if sink is None:
        sink = ConsoleSink()
    try:
        source = InMemorySource.from_paths(paths)
    except OSError as e:
        logger.error("decode_file_unreadable", error=str(e))
        return 2

    dispatcher = Dispatcher(settings, source, sink)
    failed = 0
    for delivery in source.deliveries():
        if dispatcher.handle(delivery) is not Outcome.RENDERED:
            failed += 1
            sink.emit(f"-> Unable to decode message: {delivery.message_id}")
    return 1 if failed else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="event-receiver", description="Consume and render universal event messages.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--pretty-logs", action="store_true", help="console log format instead of JSON")
    commands = parser.add_subparsers(dest="command")
    commands.add_parser("consume", help="consume events from the broker (default)")
    decode_parser = commands.add_parser("decode", help="decode and render message files")
    decode_parser.add_argument("files", nargs="+", metavar="FILE")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(
        json_output=settings.LOG_JSON and not args.pretty_logs,
        service_name="event-receiver",
        level=settings.LOG_LEVEL,
    )

    if args.command == "decode":
        return decode(settings, args.files)
    return consume(settings)


if __name__ == "__main__":
    sys.exit(main())
