"""In-memory message source."""
from pathlib import Path
from typing import Iterable, Iterator
import structlog
from .base import Delivery, MessageSource

log = structlog.get_logger()


class InMemoryDelivery(Delivery):
    """Delivery backed by a prepared body; records how it was settled."""

    def __init__(self, body: bytes, delivery_tag: int, message_id: str | None = None):
        self.body = body
        self.delivery_tag = delivery_tag
        self.message_id = message_id
        self.acked = False
        self.rejected = False
        self.requeued = False

    @property
    def settled(self) -> bool:
        return self.acked or self.rejected

    def _check_unsettled(self):
        if self.settled:
            raise RuntimeError(f"Delivery {self.delivery_tag} already settled")

    def ack(self) -> None:
        self._check_unsettled()
        self.acked = True

    def reject(self, requeue: bool = True) -> None:
        self._check_unsettled()
        self.rejected = True
        self.requeued = requeue


class InMemorySource(MessageSource):
    """Yields a fixed sequence of message bodies, in order."""

    def __init__(self, bodies: Iterable[bytes] = (), message_ids: Iterable[str] | None = None):
        ids = list(message_ids) if message_ids is not None else []
        self.delivered: list[InMemoryDelivery] = [
            InMemoryDelivery(body, tag, ids[tag - 1] if tag <= len(ids) else None)
            for tag, body in enumerate(bodies, start=1)
        ]
        self._stopped = False

    @classmethod
    def from_paths(cls, paths: Iterable[str | Path]) -> "InMemorySource":
        """Load each file as one message body, tagged with its path."""
        paths = [Path(p) for p in paths]
        return cls([p.read_bytes() for p in paths], message_ids=[str(p) for p in paths])

    def deliveries(self) -> Iterator[Delivery]:
        for delivery in self.delivered:
            if self._stopped:
                break
            yield delivery

    def stop(self) -> None:
        self._stopped = True

    def close(self) -> None:
        self._stopped = True
        log.debug("source.closed", adapter="memory")

    def health_check(self) -> bool:
        """In-memory source is healthy until stopped."""
        return not self._stopped
