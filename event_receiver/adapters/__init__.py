from .base import Delivery, MessageSource
from .memory import InMemoryDelivery, InMemorySource
from .rabbitmq import RabbitMQDelivery, RabbitMQSource

__all__ = [
    "Delivery",
    "MessageSource",
    "InMemoryDelivery",
    "InMemorySource",
    "RabbitMQDelivery",
    "RabbitMQSource",
]
