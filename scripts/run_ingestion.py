#!/usr/bin/env python3
"""
Crawl the TVmaze show index and backfill cast into the local store.

Usage:
    # One cycle: crawl new pages, then backfill cast once the index is exhausted
    PYTHONPATH=. python scripts/run_ingestion.py --once

    # Keep polling for new shows every TVMAZE_POLL_INTERVAL_SECONDS
    PYTHONPATH=. python scripts/run_ingestion.py

    # Only backfill cast for shows already stored
    PYTHONPATH=. python scripts/run_ingestion.py --backfill-only
"""

from __future__ import annotations

import argparse
import logging
import sys

from tvmaze_backend.db.store import FileKeyValueStore, StoreError
from tvmaze_backend.ingestion.scheduler import IngestionScheduler, build_ingestion_cycle
from tvmaze_backend.settings import load_settings

logger = logging.getLogger("run_ingestion")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="run_ingestion",
        description="Crawl the TVmaze show index and backfill cast into the local store.",
    )
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit.")
    parser.add_argument(
        "--backfill-only",
        action="store_true",
        help="Skip the crawl and only backfill cast for stored shows.",
    )
    parser.add_argument("--data-dir", default=None, help="Store directory (default: TVMAZE_DATA_DIR or ./data).")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings(data_dir=args.data_dir)
    store = FileKeyValueStore(settings.data_dir)
    try:
        store.init()
    except StoreError as exc:
        print(f"[run_ingestion] ERROR: {exc}", file=sys.stderr)
        return 1

    cycle = build_ingestion_cycle(settings, store)
    scheduler: IngestionScheduler | None = None
    try:
        if args.backfill_only:
            backfiller = cycle.crawler.backfiller
            summary = backfiller.run() if backfiller is not None else None
            print(f"[run_ingestion] backfill: {summary}")
        elif args.once:
            summary = cycle.run()
            print(f"[run_ingestion] cycle: {summary}")
        else:
            scheduler = IngestionScheduler(cycle, interval_seconds=settings.poll_interval_seconds)
            scheduler.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    if scheduler is not None and not scheduler.stop(timeout=5.0):
        logger.warning("Ingestion cycle still running; exiting without closing the store")
        return 0
    store.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
