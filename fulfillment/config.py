"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Downstream URLs, ports and delays come from the environment (never hardcoded in routes)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: the three services run side by side
      on localhost out-of-the-box
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Settings shared by the order, inventory and gateway services."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Listen addresses
    host: str = "0.0.0.0"
    gateway_port: int = 3000
    order_service_port: int = 3001
    inventory_service_port: int = 3002

    # Downstream services (gateway)
    order_service_url: str = "http://localhost:3001"
    inventory_service_url: str = "http://localhost:3002"

    @field_validator("order_service_url", "inventory_service_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Routes append absolute paths, so the base URL must not end in '/'."""
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    gateway_timeout_seconds: float = 10.0
    gateway_max_retries: int = 2
    gateway_retry_base_delay_ms: int = 100
    gateway_retry_max_delay_ms: int = 2000
    gateway_duration_window: int = 1000

    # Order processing simulation
    order_processing_delay_seconds: float = 0.5
    order_completion_delay_seconds: float = 1.0

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
