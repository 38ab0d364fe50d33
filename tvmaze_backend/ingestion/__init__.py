"""
Ingestion pipeline: catalog crawl, cast backfill, and the cycle scheduler.
"""

from tvmaze_backend.ingestion.cast_backfill import (
    BackfillSummary,
    CastBackfiller,
    build_cast,
    fetch_cast_for_show,
    sort_cast_by_birthday,
)
from tvmaze_backend.ingestion.catalog_crawler import CatalogCrawler, CrawlSummary, start_page_for
from tvmaze_backend.ingestion.scheduler import IngestionCycle, IngestionScheduler

__all__ = [
    "BackfillSummary",
    "CastBackfiller",
    "CatalogCrawler",
    "CrawlSummary",
    "IngestionCycle",
    "IngestionScheduler",
    "build_cast",
    "fetch_cast_for_show",
    "sort_cast_by_birthday",
    "start_page_for",
]
