"""Application settings read from the environment.

Protean's own configuration (providers, brokers) lives in ``domain.toml``;
this module covers the knobs of the store itself.
"""

import os
from functools import lru_cache

from pydantic import BaseModel, Field


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if not value:
        return default
    return [item.strip().lower() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    environment: str = "development"

    notification_batch_size: int = Field(default=30, ge=1)
    notification_batch_delay_ms: int = Field(default=100, ge=0)
    notification_channels: list[str] = Field(default_factory=lambda: ["telegram"])
    notification_workers: int = Field(default=4, ge=1)

    otp_ttl_seconds: int = Field(default=3600, ge=1)
    otp_sweep_interval_seconds: int = Field(default=600, ge=1)

    product_page_limit: int = Field(default=20, ge=1, le=100)

    @property
    def is_production(self) -> bool:
        return self.environment in ("production", "prod")

    @property
    def notification_batch_delay(self) -> float:
        return self.notification_batch_delay_ms / 1000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            environment=(os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower(),
            notification_batch_size=_env_int("NOTIFICATION_BATCH_SIZE", 30),
            notification_batch_delay_ms=_env_int("NOTIFICATION_BATCH_DELAY_MS", 100),
            notification_channels=_env_list("NOTIFICATION_CHANNELS", ["telegram"]),
            notification_workers=_env_int("NOTIFICATION_WORKERS", 4),
            otp_ttl_seconds=_env_int("OTP_TTL_SECONDS", 3600),
            otp_sweep_interval_seconds=_env_int("OTP_SWEEP_INTERVAL_SECONDS", 600),
            product_page_limit=_env_int("PRODUCT_PAGE_LIMIT", 20),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
