from __future__ import annotations

from pathlib import Path

import pytest

import scripts.run_ingestion as run_ingestion
from tvmaze_backend.ingestion.catalog_crawler import CrawlSummary


class _FakeBackfiller:
    def __init__(self) -> None:
        self.calls = 0

    def run(self):  # noqa: ANN201
        self.calls += 1
        return None


class _FakeCrawler:
    def __init__(self) -> None:
        self.backfiller = _FakeBackfiller()


class _FakeCycle:
    def __init__(self) -> None:
        self.crawler = _FakeCrawler()
        self.calls = 0

    def run(self) -> CrawlSummary:
        self.calls += 1
        return CrawlSummary(start_page=1, pages_fetched=1, shows_added=3, end_reached=True)


@pytest.fixture
def fake_cycle(monkeypatch: pytest.MonkeyPatch) -> _FakeCycle:
    cycle = _FakeCycle()
    monkeypatch.setattr(run_ingestion, "build_ingestion_cycle", lambda settings, store: cycle)
    return cycle


def test_once_runs_a_single_cycle(tmp_path: Path, fake_cycle: _FakeCycle) -> None:
    assert run_ingestion.main(["--once", "--data-dir", str(tmp_path)]) == 0
    assert fake_cycle.calls == 1
    assert fake_cycle.crawler.backfiller.calls == 0


def test_backfill_only_skips_crawl(tmp_path: Path, fake_cycle: _FakeCycle) -> None:
    assert run_ingestion.main(["--backfill-only", "--data-dir", str(tmp_path)]) == 0
    assert fake_cycle.calls == 0
    assert fake_cycle.crawler.backfiller.calls == 1


def test_unwritable_store_exits_non_zero(tmp_path: Path, fake_cycle: _FakeCycle) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x")
    assert run_ingestion.main(["--once", "--data-dir", str(blocker / "data")]) == 1
    assert fake_cycle.calls == 0
