"""RabbitMQ message source adapter."""
from queue import Empty
from typing import TYPE_CHECKING, Iterator

import structlog
from kombu import Connection, Exchange, Queue
from kombu.exceptions import KombuError

from .base import Delivery, MessageSource
from ..config import Settings
from ..errors import TransportError

if TYPE_CHECKING:
    from kombu.message import Message
    from kombu.simple import SimpleQueue

log = structlog.get_logger()


class RabbitMQDelivery(Delivery):
    """Wraps a kombu message; settles on the channel that delivered it."""

    def __init__(self, message: "Message", transport_errors: tuple = ()):
        self._message = message
        self._errors = transport_errors + (KombuError,)
        body = message.body
        self.body = body if isinstance(body, bytes) else str(body).encode("utf-8")
        self.delivery_tag = message.delivery_tag or 0
        self.message_id = message.properties.get("message_id")
        info = message.delivery_info or {}
        self.routing_key = info.get("routing_key") or ""
        self.redelivered = bool(info.get("redelivered"))

    def ack(self) -> None:
        try:
            self._message.ack()
        except self._errors as e:
            raise TransportError(f"ack of delivery {self.delivery_tag} failed: {e}") from e

    def reject(self, requeue: bool = True) -> None:
        try:
            self._message.reject(requeue=requeue)
        except self._errors as e:
            raise TransportError(f"reject of delivery {self.delivery_tag} failed: {e}") from e


class RabbitMQSource(MessageSource):
    """RabbitMQ implementation of the message source.

    Declares the configured queue, binds it to an existing topic exchange
    with the routing key and pulls messages with manual acknowledgement.
    """

    def __init__(self, settings: Settings, poll_interval: float = 1.0):
        """
        Initialize RabbitMQ source.

        Args:
            settings: Broker, queue and binding configuration
            poll_interval: Seconds to block per pull before re-checking stop()
        """
        self.settings = settings
        self.poll_interval = poll_interval
        self._connection: Connection | None = None
        self._queue: "SimpleQueue | None" = None
        self._stopped = False

    def _build_queue(self) -> Queue:
        s = self.settings
        # The exchange is provisioned by the publisher side; only bind to it
        exchange = Exchange(s.EXCHANGE_NAME, type="topic", no_declare=True)
        arguments = {}
        if s.DEAD_LETTER_EXCHANGE:
            arguments["x-dead-letter-exchange"] = s.DEAD_LETTER_EXCHANGE
        return Queue(
            s.QUEUE_NAME,
            exchange=exchange,
            routing_key=s.ROUTING_KEY,
            durable=s.QUEUE_DURABLE,
            exclusive=s.QUEUE_EXCLUSIVE,
            auto_delete=s.QUEUE_AUTO_DELETE,
            queue_arguments=arguments or None,
        )

    @property
    def _transport_errors(self) -> tuple:
        if self._connection is None:
            return (OSError,)
        return tuple(self._connection.connection_errors) + tuple(self._connection.channel_errors)

    def connect(self) -> None:
        """
        Connect, declare the queue and bind it.

        Raises:
            TransportError: If the broker is unreachable or refuses a declaration
        """
        s = self.settings
        log.info("transport.connecting", host=s.AMQP_HOST, port=s.AMQP_PORT, vhost=s.AMQP_VHOST)

        self._connection = Connection(
            hostname=s.AMQP_HOST,
            port=s.AMQP_PORT,
            userid=s.AMQP_USERNAME,
            password=s.AMQP_PASSWORD.get_secret_value(),
            virtual_host=s.AMQP_VHOST,
            transport="pyamqp",
            connect_timeout=5,
        )

        try:
            self._connection.ensure_connection(max_retries=1)

            log.info(
                "transport.binding_queue",
                queue=s.QUEUE_NAME,
                exchange=s.EXCHANGE_NAME,
                routing_key=s.ROUTING_KEY,
                durable=s.QUEUE_DURABLE,
                exclusive=s.QUEUE_EXCLUSIVE,
                auto_delete=s.QUEUE_AUTO_DELETE,
            )
            # Declares the queue and binding on creation
            self._queue = self._connection.SimpleQueue(self._build_queue())
            self._queue.consumer.qos(prefetch_count=s.PREFETCH_COUNT)
        except self._transport_errors + (KombuError,) as e:
            log.error("transport.connect_failed", error=str(e), error_type=e.__class__.__name__)
            self.close()
            raise TransportError(f"Unable to connect to {s.AMQP_HOST}:{s.AMQP_PORT}: {e}") from e

        log.info("transport.connected", queue=s.QUEUE_NAME, prefetch=s.PREFETCH_COUNT)

    def deliveries(self) -> Iterator[Delivery]:
        """
        Pull messages one at a time until stop() is called.

        Raises:
            TransportError: If not connected or the connection fails mid-stream
        """
        if self._queue is None:
            raise TransportError("Not connected. Call connect() first.")

        errors = self._transport_errors
        log.info("transport.consuming", queue=self.settings.QUEUE_NAME)
        while not self._stopped:
            try:
                message = self._queue.get(block=True, timeout=self.poll_interval)
            except Empty:
                continue
            except errors + (KombuError,) as e:
                log.error("transport.consume_failed", error=str(e), error_type=e.__class__.__name__)
                raise TransportError(f"Consuming {self.settings.QUEUE_NAME} failed: {e}") from e
            yield RabbitMQDelivery(message, errors)

    def stop(self) -> None:
        self._stopped = True

    def close(self) -> None:
        """Close the consumer and broker connection."""
        self._stopped = True
        if self._queue is not None:
            try:
                self._queue.close()
            except self._transport_errors as e:
                log.warning("transport.close_failed", error=str(e))
            self._queue = None
        if self._connection is not None:
            self._connection.release()
            self._connection = None
            log.info("transport.closed")

    def health_check(self) -> bool:
        """
        Check broker connection health.

        Returns:
            True if the connection is open and consuming, False otherwise
        """
        if self._connection is None or self._queue is None:
            return False
        return bool(self._connection.connected) and not self._stopped
