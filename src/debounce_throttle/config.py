from __future__ import annotations

from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_KEY_PREFIX = "debounce-throttle:"
DEFAULT_LOCK_EXPIRY = timedelta(seconds=10)


class Settings(BaseSettings):
    """Settings shared by every dispatcher built from one factory.

    Values can be supplied directly or through ``DEBOUNCE_THROTTLE_*``
    environment variables (``.env`` is honoured). Instances are immutable.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEBOUNCE_THROTTLE_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    # Namespacing for every key written to the shared store
    key_prefix: str = DEFAULT_KEY_PREFIX

    # Distributed lock
    lock_expiry: timedelta = DEFAULT_LOCK_EXPIRY
    lock_retry_count: int = Field(default=0, ge=0)
    lock_retry_delay: timedelta = timedelta(milliseconds=200)

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Observability
    log_level: str = "INFO"
    log_json: bool = False
    enable_metrics: bool = True


settings = Settings()
