from typing import Literal

from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    """

    database_url: str = "sqlite+pysqlite:///./anki_heatmap.db"
    ankiconnect_timeout_seconds: float = 10.0
    colour_scheme: str = "blue"
    colour_mode: Literal["buckets", "gradient"] = "buckets"
    snapshot_window_days: int = 7 * 17
    repository_url: str = "https://github.com/mharry97/anki-scriptables-widget"
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
