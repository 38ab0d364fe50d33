from __future__ import annotations

import random
import time
from typing import Any, Mapping

import requests
from pydantic import TypeAdapter, ValidationError

from tvmaze_backend.integrations.tvmaze.schemas import (
    CAST_ADAPTER,
    SHOWS_PAGE_ADAPTER,
    TvmazeCastCredit,
    TvmazeShowRecord,
)
from tvmaze_backend.settings import TVMAZE_API_BASE_URL


class TvmazeClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, body_snippet: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet


class TvmazeNotFoundError(TvmazeClientError):
    """HTTP 404. For `/shows?page=N` this is the end-of-pagination signal."""

    pass


def _request_json(
    session: requests.Session,
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    timeout_seconds: float = 20.0,
    max_attempts: int = 1,
) -> Any:
    headers = {
        "accept": "application/json",
        "user-agent": "tvmaze-backend/0.1",
    }
    max_attempts = max(1, int(max_attempts))

    last_response: requests.Response | None = None
    for attempt in range(max_attempts):
        try:
            resp = session.get(url, params=params, headers=headers, timeout=timeout_seconds)
        except requests.RequestException as exc:
            if attempt < max_attempts - 1:
                delay = 1.0 * (2**attempt)
                jitter = random.uniform(0.0, delay * 0.25)
                time.sleep(delay + jitter)
                continue
            raise TvmazeClientError(f"TVmaze request failed: {exc}") from exc

        last_response = resp
        if resp.status_code == 200:
            break

        if resp.status_code == 404:
            raise TvmazeNotFoundError(
                "TVmaze returned HTTP 404.",
                status_code=404,
                body_snippet=(resp.text or "")[:400],
            )

        retryable = resp.status_code == 429 or 500 <= resp.status_code < 600
        if retryable and attempt < max_attempts - 1:
            delay = 1.0 * (2**attempt)
            retry_after = (resp.headers.get("Retry-After") or "").strip()
            if retry_after.isdigit():
                delay = max(delay, float(retry_after))
            jitter = random.uniform(0.0, delay * 0.25)
            time.sleep(delay + jitter)
            continue

        raise TvmazeClientError(
            f"TVmaze request failed with HTTP {resp.status_code}.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        )

    if last_response is None:
        raise TvmazeClientError("TVmaze request failed (no response).")
    resp = last_response

    try:
        return resp.json()
    except ValueError as exc:
        raise TvmazeClientError(
            "TVmaze returned non-JSON response.",
            status_code=resp.status_code,
            body_snippet=(resp.text or "")[:400],
        ) from exc


def _validate(adapter: TypeAdapter, payload: Any, *, context: str) -> list:
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise TvmazeClientError(f"TVmaze returned unexpected JSON shape for {context}: {exc}") from exc


class TvmazeClient:
    """
    Thin client for the two TVmaze endpoints the pipeline consumes.
    """

    def __init__(
        self,
        *,
        base_url: str = TVMAZE_API_BASE_URL,
        session: requests.Session | None = None,
        timeout_seconds: float = 20.0,
        max_attempts: int = 1,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout_seconds = timeout_seconds
        self.max_attempts = max_attempts

    def fetch_shows_page(self, page: int) -> list[TvmazeShowRecord]:
        """
        Fetch one page of the show index (`/shows?page=N`).

        Raises `TvmazeNotFoundError` past the last page.
        """

        payload = _request_json(
            self.session,
            f"{self.base_url}/shows",
            params={"page": int(page)},
            timeout_seconds=self.timeout_seconds,
            max_attempts=self.max_attempts,
        )
        return _validate(SHOWS_PAGE_ADAPTER, payload, context=f"shows page {page}")

    def fetch_show_cast(self, show_id: int) -> list[TvmazeCastCredit]:
        payload = _request_json(
            self.session,
            f"{self.base_url}/shows/{int(show_id)}/cast",
            timeout_seconds=self.timeout_seconds,
            max_attempts=self.max_attempts,
        )
        return _validate(CAST_ADAPTER, payload, context=f"cast of show {show_id}")

    def close(self) -> None:
        self.session.close()
