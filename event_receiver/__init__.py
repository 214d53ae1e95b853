"""Event Receiver - consumes universal event messages from RabbitMQ and renders them."""

__version__ = "0.1.0"
