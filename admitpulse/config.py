"""Application configuration loaded from environment variables."""

from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings

from admitpulse.domain.enums import FilterMode


class Settings(BaseSettings):
    app_name: str = "admitpulse"
    debug: bool = False
    log_level: str = "INFO"

    # Upstream statistics endpoint
    stats_url: str = ""
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    request_timeout_seconds: float = 10.0

    # Refresh cadence and retry policy
    refresh_interval_seconds: float = 60.0
    poll_enabled: bool = True
    fetch_retries: int = 2
    retry_delay_seconds: float = 0.5

    # Aggregation
    filter_mode: FilterMode = FilterMode.SERVER
    sort_table: bool = True
    max_tracked_filter_sets: int = 32

    cors_origins: list[str] = ["*"]

    model_config = {"env_prefix": "DASHBOARD_"}

    @property
    def signing_enabled(self) -> bool:
        return bool(self.client_id and self.client_secret)


settings = Settings()
