"""
Runtime settings for the ingestion pipeline and the read API.

All values come from environment variables (optionally loaded from `.env`).
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from tvmaze_backend.utils.env import env_bool, env_float, env_int, env_str, load_env

TVMAZE_API_BASE_URL = "https://api.tvmaze.com"
DEFAULT_DATA_DIR = "data"
DEFAULT_PAGE_WIDTH = 250
DEFAULT_RATELIMIT_TIMESPAN_MS = 10 * 1000
DEFAULT_RATELIMIT_SHOWS_CALLS = 20
DEFAULT_RATELIMIT_CAST_CALLS = 20
DEFAULT_POLL_INTERVAL_SECONDS = 60 * 60


@dataclass(frozen=True)
class Settings:
    api_base_url: str = TVMAZE_API_BASE_URL
    data_dir: Path = Path(DEFAULT_DATA_DIR)
    page_width: int = DEFAULT_PAGE_WIDTH
    ratelimit_timespan_ms: int = DEFAULT_RATELIMIT_TIMESPAN_MS
    ratelimit_shows_calls: int = DEFAULT_RATELIMIT_SHOWS_CALLS
    ratelimit_cast_calls: int = DEFAULT_RATELIMIT_CAST_CALLS
    poll_interval_seconds: int = DEFAULT_POLL_INTERVAL_SECONDS
    request_timeout_seconds: float = 20.0
    max_attempts: int = 1
    ingestion_enabled: bool = True


def load_settings(*, data_dir: str | Path | None = None) -> Settings:
    load_env()
    return Settings(
        api_base_url=env_str("TVMAZE_API_BASE_URL", TVMAZE_API_BASE_URL).rstrip("/"),
        data_dir=Path(data_dir) if data_dir else Path(env_str("TVMAZE_DATA_DIR", DEFAULT_DATA_DIR)),
        page_width=env_int("TVMAZE_PAGE_WIDTH", DEFAULT_PAGE_WIDTH, minimum=1),
        ratelimit_timespan_ms=env_int("TVMAZE_RATELIMIT_TIMESPAN_MS", DEFAULT_RATELIMIT_TIMESPAN_MS, minimum=0),
        ratelimit_shows_calls=env_int("TVMAZE_RATELIMIT_SHOWS_CALLS", DEFAULT_RATELIMIT_SHOWS_CALLS, minimum=1),
        ratelimit_cast_calls=env_int("TVMAZE_RATELIMIT_CAST_CALLS", DEFAULT_RATELIMIT_CAST_CALLS, minimum=1),
        poll_interval_seconds=env_int("TVMAZE_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS, minimum=1),
        request_timeout_seconds=env_float("TVMAZE_REQUEST_TIMEOUT_SECONDS", 20.0),
        max_attempts=env_int("TVMAZE_MAX_ATTEMPTS", 1, minimum=1),
        ingestion_enabled=env_bool("TVMAZE_INGESTION_ENABLED", True),
    )
