from __future__ import annotations

from pathlib import Path

import pytest

from tvmaze_backend.db.store import FileKeyValueStore
from tvmaze_backend.ingestion.catalog_crawler import CatalogCrawler, start_page_for
from tvmaze_backend.integrations.tvmaze.client import TvmazeClientError, TvmazeNotFoundError
from tvmaze_backend.integrations.tvmaze.schemas import TvmazeShowRecord
from tvmaze_backend.repositories.shows import load_shows
from tvmaze_backend.repositories.sync_state import get_last_show_id, set_last_show_id
from tvmaze_backend.utils.rate_limit import build_rate_limiter

PAGE_WIDTH = 3


def _page(page: int) -> list[TvmazeShowRecord]:
    # Page p holds ids p*W .. p*W+W-1, like the upstream index.
    start = page * PAGE_WIDTH
    return [TvmazeShowRecord(id=i, name=f"Show {i}") for i in range(start, start + PAGE_WIDTH)]


class _FakeIndex:
    def __init__(self, pages: dict[int, list[TvmazeShowRecord] | Exception]) -> None:
        self.pages = pages
        self.requested: list[int] = []

    def fetch_shows_page(self, page: int) -> list[TvmazeShowRecord]:
        self.requested.append(page)
        item = self.pages.get(page)
        if item is None:
            raise TvmazeNotFoundError("TVmaze returned HTTP 404.", status_code=404)
        if isinstance(item, Exception):
            raise item
        return item


class _RecordingBackfiller:
    def __init__(self, store: FileKeyValueStore) -> None:
        self.store = store
        self.calls = 0
        self.ids_seen: list[list[int]] = []

    def run(self):  # noqa: ANN201
        self.calls += 1
        self.ids_seen.append([show.id for show in load_shows(self.store)])
        return None


@pytest.fixture
def store(tmp_path: Path) -> FileKeyValueStore:
    store = FileKeyValueStore(tmp_path)
    store.init()
    return store


@pytest.fixture
def sleeps() -> list[float]:
    return []


def _crawler(store, index, sleeps, backfiller=None) -> CatalogCrawler:  # noqa: ANN001
    limiter = build_rate_limiter(timespan_ms=1000, catalog_calls=4, enrichment_calls=4, sleep=sleeps.append)
    return CatalogCrawler(store, index, limiter, backfiller=backfiller, page_width=PAGE_WIDTH)


def test_start_page_formula() -> None:
    assert start_page_for(0) == 1
    assert start_page_for(749, 250) == 3
    assert start_page_for(750, 250) == 4
    assert start_page_for(999, 250) == 4


def test_resumes_from_persisted_cursor(store: FileKeyValueStore, sleeps: list[float]) -> None:
    set_last_show_id(store, 749)
    index = _FakeIndex({})
    limiter = build_rate_limiter(timespan_ms=1000, catalog_calls=4, enrichment_calls=4, sleep=sleeps.append)

    summary = CatalogCrawler(store, index, limiter, page_width=250).run()

    assert index.requested == [3]
    assert summary.last_page is None
    assert summary.backfill_ran is False


def test_end_of_pagination_hands_off_to_backfill_once(store: FileKeyValueStore, sleeps: list[float]) -> None:
    index = _FakeIndex({1: _page(1), 2: _page(2)})
    backfiller = _RecordingBackfiller(store)

    summary = _crawler(store, index, sleeps, backfiller).run()

    assert index.requested == [1, 2, 3]
    assert backfiller.calls == 1
    assert backfiller.ids_seen == [[3, 4, 5, 6, 7, 8]]
    assert summary.end_reached is True
    assert summary.pages_fetched == 2
    assert summary.shows_added == 6
    assert summary.last_page == 2
    assert summary.backfill_ran is True
    assert get_last_show_id(store) == 8
    assert sleeps == [pytest.approx(0.25), pytest.approx(0.25)]


def test_new_shows_start_without_cast(store: FileKeyValueStore, sleeps: list[float]) -> None:
    _crawler(store, _FakeIndex({1: _page(1)}), sleeps).run()
    assert all(show.cast is None for show in load_shows(store))


def test_other_failure_stops_without_backfill(store: FileKeyValueStore, sleeps: list[float]) -> None:
    index = _FakeIndex({1: _page(1), 2: TvmazeClientError("TVmaze request failed with HTTP 503.", status_code=503)})
    backfiller = _RecordingBackfiller(store)

    summary = _crawler(store, index, sleeps, backfiller).run()

    assert index.requested == [1, 2]
    assert backfiller.calls == 0
    assert summary.end_reached is False
    assert summary.error is not None
    assert summary.last_page == 1
    assert summary.backfill_ran is False
    assert get_last_show_id(store) == 5
    assert [s.id for s in load_shows(store)] == [3, 4, 5]


def test_rerun_after_failure_refetches_failed_page_without_duplicates(
    store: FileKeyValueStore, sleeps: list[float]
) -> None:
    failing = _FakeIndex({1: _page(1), 2: TvmazeClientError("timeout")})
    _crawler(store, failing, sleeps).run()

    healed = _FakeIndex({1: _page(1), 2: _page(2)})
    _crawler(store, healed, sleeps).run()

    assert healed.requested == [2, 3]
    assert [s.id for s in load_shows(store)] == [3, 4, 5, 6, 7, 8]


def test_empty_page_is_treated_as_end(store: FileKeyValueStore, sleeps: list[float]) -> None:
    index = _FakeIndex({1: _page(1), 2: []})
    backfiller = _RecordingBackfiller(store)

    summary = _crawler(store, index, sleeps, backfiller).run()

    assert summary.end_reached is True
    assert backfiller.calls == 1
    assert get_last_show_id(store) == 5


def test_completed_crawl_resumes_past_last_page(store: FileKeyValueStore, sleeps: list[float]) -> None:
    _crawler(store, _FakeIndex({1: _page(1), 2: _page(2)}), sleeps).run()

    index = _FakeIndex({1: _page(1), 2: _page(2), 3: _page(3)})
    _crawler(store, index, sleeps).run()

    assert index.requested == [3, 4]
    assert [s.id for s in load_shows(store)][-3:] == [9, 10, 11]
