from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Literal

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RECEIVER_", env_file=".env", extra="ignore")

    ENV: str = "dev"
    # Broker connection
    AMQP_HOST: str = "localhost"
    AMQP_PORT: int = 5672
    AMQP_USERNAME: str = "guest"
    AMQP_PASSWORD: SecretStr = SecretStr("guest")
    AMQP_VHOST: str = "/"
    # Queue declaration and binding
    QUEUE_NAME: str = "events.receiver.test"
    EXCHANGE_NAME: str = "acm.leps"
    ROUTING_KEY: str = "events.#"
    QUEUE_DURABLE: bool = True
    QUEUE_EXCLUSIVE: bool = False
    QUEUE_AUTO_DELETE: bool = False
    DEAD_LETTER_EXCHANGE: str | None = None
    # One message in flight keeps delivery order
    PREFETCH_COUNT: int = 1
    # Whether rejected (undecodable) messages go back to the queue
    REQUEUE_ON_FAILURE: bool = True
    # Logging
    LOG_JSON: bool = True
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    # Ops HTTP server (health + metrics)
    OPS_ENABLED: bool = False
    OPS_PORT: int = 8080

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
