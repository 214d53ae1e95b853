"""
Dispatch loop: sniff, decode, render and acknowledge each delivered message.

Per message:

    Received -> Sniffed -> Skipped -------------> Acknowledged
                        -> Decoded -> Rendered -> Acknowledged
             (decode or render failure)          -> Failed (rejected, never acked)

Messages are handled one at a time in delivery order.
"""
from contextlib import nullcontext
from enum import Enum
from typing import Dict

import structlog

from .adapters.base import Delivery, MessageSource
from .codec import decode_envelope, decode_event
from .config import Settings
from .errors import DecodeError
from .metrics import Metrics
from .render import format_report
from .sinks.base import ReportSink

log = structlog.get_logger()


class Outcome(str, Enum):
    """Terminal state of one delivered message."""
    RENDERED = "rendered"
    SKIPPED = "skipped"
    FAILED = "failed"


class Dispatcher:
    """
    Sequential consumer of a message source.

    Accepted events are rendered to the sink, other well-formed envelopes are
    acknowledged without decoding, and undecodable messages are rejected so
    the broker can redeliver or dead-letter them.
    """

    def __init__(
        self,
        settings: Settings,
        source: MessageSource,
        sink: ReportSink,
        metrics: Metrics | None = None,
    ):
        """
        Initialize dispatcher.

        Args:
            settings: Static configuration, constructed once at startup
            source: Ordered delivery source
            sink: Destination for rendered reports
            metrics: Optional Prometheus metrics
        """
        self.settings = settings
        self.source = source
        self.sink = sink
        self.metrics = metrics
        self._counts: Dict[str, int] = {outcome.value: 0 for outcome in Outcome}
        self._running = False

    @property
    def stats(self) -> Dict[str, int]:
        """Number of messages per outcome."""
        return dict(self._counts)

    def run(self) -> Dict[str, int]:
        """
        Handle deliveries until the source is exhausted or stop() is called.

        Returns:
            Outcome counts

        Raises:
            TransportError: If the source fails
        """
        self._running = True
        log.info("dispatcher.started", queue=self.settings.QUEUE_NAME)
        for delivery in self.source.deliveries():
            self.handle(delivery)
            if not self._running:
                break
        self._running = False
        log.info("dispatcher.stopped", **self._counts)
        return self.stats

    def stop(self):
        """Stop after the message currently being handled. Safe from a signal handler."""
        self._running = False
        self.source.stop()

    def handle(self, delivery: Delivery) -> Outcome:
        """
        Process one delivery and settle it exactly once.

        Args:
            delivery: The delivered message

        Returns:
            The terminal outcome
        """
        with structlog.contextvars.bound_contextvars(
            delivery_tag=delivery.delivery_tag,
            message_id=delivery.message_id,
        ):
            outcome = self._process(delivery)
        self._counts[outcome.value] += 1
        if self.metrics:
            self.metrics.record_outcome(outcome.value)
        return outcome

    def _process(self, delivery: Delivery) -> Outcome:
        body = delivery.body
        log.info(
            "message.received",
            size=len(body),
            routing_key=delivery.routing_key,
            redelivered=delivery.redelivered,
        )
        log.debug("message.body", body=body.decode("utf-8", errors="replace"))
        if self.metrics:
            self.metrics.record_received(len(body))

        try:
            with self._timer("envelope"):
                envelope = decode_envelope(body)
        except DecodeError as e:
            return self._fail(delivery, e)

        if not envelope.accepted:
            log.info(
                "envelope.skipped",
                message_type=envelope.type,
                message_ver=envelope.version,
                valid=envelope.valid,
            )
            self._ack(delivery)
            return Outcome.SKIPPED

        try:
            with self._timer("event"):
                event = decode_event(body)
        except DecodeError as e:
            return self._fail(delivery, e)

        try:
            self.sink.emit(format_report(event))
        except Exception as e:
            log.exception("event.render_failed", error=str(e), error_type=e.__class__.__name__)
            self._reject(delivery)
            return Outcome.FAILED

        log.info(
            "event.rendered",
            code=event.code,
            gateway=event.gateway,
            device=event.device.primary_id,
            importance=event.importance,
            alert_level=event.alert_level,
        )
        if self.metrics:
            level = event.importance_level
            self.metrics.record_rendered(level.value if level else "unknown")

        self._ack(delivery)
        return Outcome.RENDERED

    def _fail(self, delivery: Delivery, error: DecodeError) -> Outcome:
        log.warning(f"{error.stage}.decode_failed", error=error.detail)
        self._reject(delivery)
        return Outcome.FAILED

    def _ack(self, delivery: Delivery):
        delivery.ack()
        log.info("message.acknowledged")

    def _reject(self, delivery: Delivery):
        requeue = self.settings.REQUEUE_ON_FAILURE
        delivery.reject(requeue=requeue)
        log.info("message.rejected", requeue=requeue)

    def _timer(self, stage: str):
        if self.metrics is None:
            return nullcontext()
        return self.metrics.decode_seconds.labels(stage=stage).time()
