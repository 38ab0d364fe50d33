from __future__ import annotations

from pathlib import Path

import pytest

from tvmaze_backend import settings as settings_module
from tvmaze_backend.settings import load_settings


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings_module, "load_env", lambda: None)
    for name in (
        "TVMAZE_API_BASE_URL",
        "TVMAZE_DATA_DIR",
        "TVMAZE_PAGE_WIDTH",
        "TVMAZE_RATELIMIT_TIMESPAN_MS",
        "TVMAZE_RATELIMIT_SHOWS_CALLS",
        "TVMAZE_RATELIMIT_CAST_CALLS",
        "TVMAZE_POLL_INTERVAL_SECONDS",
        "TVMAZE_REQUEST_TIMEOUT_SECONDS",
        "TVMAZE_MAX_ATTEMPTS",
        "TVMAZE_INGESTION_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = load_settings()
    assert settings.api_base_url == "https://api.tvmaze.com"
    assert settings.data_dir == Path("data")
    assert settings.page_width == 250
    assert settings.ratelimit_timespan_ms == 10_000
    assert settings.ratelimit_shows_calls == 20
    assert settings.ratelimit_cast_calls == 20
    assert settings.poll_interval_seconds == 3600
    assert settings.max_attempts == 1
    assert settings.ingestion_enabled is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TVMAZE_API_BASE_URL", "http://localhost:8080/")
    monkeypatch.setenv("TVMAZE_PAGE_WIDTH", "100")
    monkeypatch.setenv("TVMAZE_INGESTION_ENABLED", "false")
    settings = load_settings(data_dir="/tmp/store")
    assert settings.api_base_url == "http://localhost:8080"
    assert settings.page_width == 100
    assert settings.ingestion_enabled is False
    assert settings.data_dir == Path("/tmp/store")


def test_invalid_integer_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TVMAZE_RATELIMIT_CAST_CALLS", "lots")
    with pytest.raises(RuntimeError, match="TVMAZE_RATELIMIT_CAST_CALLS"):
        load_settings()
