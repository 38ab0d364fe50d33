from __future__ import annotations

import logging
import threading
import time

from tvmaze_backend.db.store import FileKeyValueStore
from tvmaze_backend.ingestion.cast_backfill import CastBackfiller
from tvmaze_backend.ingestion.catalog_crawler import CatalogCrawler, CrawlSummary
from tvmaze_backend.integrations.tvmaze.client import TvmazeClient
from tvmaze_backend.settings import Settings
from tvmaze_backend.utils.rate_limit import build_rate_limiter

logger = logging.getLogger(__name__)


class IngestionCycle:
    """
    One crawl (plus the backfill it hands off to), guarded against overlap.

    A cycle that starts while another is still running in this process is
    skipped. Separate processes sharing one store are not guarded.
    """

    def __init__(self, crawler: CatalogCrawler) -> None:
        self.crawler = crawler
        self.skipped = 0
        self._running = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._running.locked()

    def run(self) -> CrawlSummary | None:
        if not self._running.acquire(blocking=False):
            self.skipped += 1
            logger.warning("Previous ingestion cycle still running; skipping this one")
            return None
        try:
            logger.info("Fetching new shows...")
            return self.crawler.run()
        finally:
            self._running.release()


class IngestionScheduler:
    """
    Fires a cycle on `start()` and then every `interval_seconds` at a fixed rate.

    Each tick runs the cycle on its own worker thread, so a tick that comes due
    while the previous cycle is still running hits the cycle's guard and is skipped.
    """

    def __init__(self, cycle: IngestionCycle, *, interval_seconds: float) -> None:
        self.cycle = cycle
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._workers: list[threading.Thread] = []
        self._workers_lock = threading.Lock()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="ingestion-scheduler", daemon=True)
        self._thread.start()

    def stop(self, *, timeout: float | None = None) -> bool:
        """
        Stop firing ticks and wait up to `timeout` for a running cycle.

        Returns False when a cycle is still running afterwards.
        """
        self._stop.set()
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._workers_lock:
            threads = list(self._workers)
        if self._thread is not None:
            threads.insert(0, self._thread)
        for thread in threads:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            thread.join(remaining)

        if self._thread is not None and not self._thread.is_alive():
            self._thread = None
        with self._workers_lock:
            self._workers = [worker for worker in self._workers if worker.is_alive()]
            busy = bool(self._workers)
        if busy or self._thread is not None:
            logger.warning("Ingestion cycle still running after stop()")
            return False
        return True

    def run_forever(self) -> None:
        """Blocking variant of `start()` for CLI use."""
        self._stop.clear()
        self._loop()

    def _run_cycle(self) -> None:
        try:
            self.cycle.run()
        except Exception:
            logger.exception("Ingestion cycle failed")

    def _tick(self) -> None:
        worker = threading.Thread(target=self._run_cycle, name="ingestion-cycle", daemon=True)
        with self._workers_lock:
            self._workers = [w for w in self._workers if w.is_alive()]
            self._workers.append(worker)
        worker.start()

    def _loop(self) -> None:
        next_at = time.monotonic()
        while not self._stop.is_set():
            self._tick()
            next_at += self.interval_seconds
            if self._stop.wait(max(0.0, next_at - time.monotonic())):
                break


def build_ingestion_cycle(
    settings: Settings,
    store: FileKeyValueStore,
    *,
    client: TvmazeClient | None = None,
) -> IngestionCycle:
    client = client or TvmazeClient(
        base_url=settings.api_base_url,
        timeout_seconds=settings.request_timeout_seconds,
        max_attempts=settings.max_attempts,
    )
    rate_limiter = build_rate_limiter(
        timespan_ms=settings.ratelimit_timespan_ms,
        catalog_calls=settings.ratelimit_shows_calls,
        enrichment_calls=settings.ratelimit_cast_calls,
    )
    backfiller = CastBackfiller(store, client, rate_limiter)
    crawler = CatalogCrawler(
        store,
        client,
        rate_limiter,
        backfiller=backfiller,
        page_width=settings.page_width,
    )
    return IngestionCycle(crawler)
