"""Base interfaces for message source backends."""
from abc import ABC, abstractmethod
from typing import Iterator


class Delivery(ABC):
    """A single delivered message and its acknowledgement handle."""

    body: bytes
    delivery_tag: int
    message_id: str | None = None
    routing_key: str = ""
    redelivered: bool = False

    @abstractmethod
    def ack(self) -> None:
        """Positively acknowledge the message on its delivering channel."""
        pass

    @abstractmethod
    def reject(self, requeue: bool = True) -> None:
        """
        Negatively acknowledge the message.

        Args:
            requeue: Return the message to the queue for redelivery
        """
        pass


class MessageSource(ABC):
    """Abstract interface for ordered message delivery backends."""

    @abstractmethod
    def deliveries(self) -> Iterator[Delivery]:
        """
        Iterate deliveries in transport order.

        Returns:
            Blocking iterator of deliveries; the next one is only pulled
            after the previous has been handled
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop yielding deliveries. Safe to call from a signal handler."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release transport resources."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """
        Check if the backend is connected.

        Returns:
            True if the source can deliver messages, False otherwise
        """
        pass
