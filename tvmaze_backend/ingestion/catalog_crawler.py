from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from tvmaze_backend.db.store import FileKeyValueStore
from tvmaze_backend.ingestion.cast_backfill import BackfillSummary, CastBackfiller
from tvmaze_backend.integrations.tvmaze.client import TvmazeClientError, TvmazeNotFoundError
from tvmaze_backend.integrations.tvmaze.schemas import TvmazeShowRecord
from tvmaze_backend.models.shows import Show
from tvmaze_backend.repositories.shows import append_shows
from tvmaze_backend.repositories.sync_state import get_last_show_id, set_last_show_id
from tvmaze_backend.settings import DEFAULT_PAGE_WIDTH
from tvmaze_backend.utils.rate_limit import CATALOG, RateLimiter

logger = logging.getLogger(__name__)


class ShowIndexSource(Protocol):
    def fetch_shows_page(self, page: int) -> list[TvmazeShowRecord]: ...


@dataclass(frozen=True)
class CrawlSummary:
    start_page: int
    pages_fetched: int
    shows_added: int
    end_reached: bool
    last_page: int | None = None  # last page stored this run
    backfill_ran: bool = False
    error: str | None = None
    backfill: BackfillSummary | None = None


def start_page_for(last_show_id: int, page_width: int = DEFAULT_PAGE_WIDTH) -> int:
    """
    Page that holds ids after `last_show_id`.

    Assumes upstream ids are assigned densely and pages are `page_width` ids wide.
    """

    return int(last_show_id or 0) // int(page_width) + 1


class CatalogCrawler:
    """
    Walks the TVmaze show index from the persisted cursor until HTTP 404.

    On reaching the end it hands off to the cast backfiller in the same call.
    Any other fetch failure ends the run quietly; the next run resumes from the
    cursor and refetches the failed page.
    """

    def __init__(
        self,
        store: FileKeyValueStore,
        client: ShowIndexSource,
        rate_limiter: RateLimiter,
        *,
        backfiller: CastBackfiller | None = None,
        page_width: int = DEFAULT_PAGE_WIDTH,
    ) -> None:
        self.store = store
        self.client = client
        self.rate_limiter = rate_limiter
        self.backfiller = backfiller
        self.page_width = page_width

    def run(self) -> CrawlSummary:
        last_show_id = get_last_show_id(self.store)
        start_page = start_page_for(last_show_id, self.page_width)
        logger.info("Crawling show index from page %d (last show id %d)", start_page, last_show_id)

        page = start_page
        pages_fetched = 0
        shows_added = 0
        end_reached = False
        error: str | None = None
        while True:
            try:
                records = self.client.fetch_shows_page(page)
            except TvmazeNotFoundError:
                logger.info("Page %d not found; show index exhausted", page)
                end_reached = True
                break
            except TvmazeClientError as exc:
                logger.error("Error fetching shows page %d: %s", page, exc)
                error = str(exc)
                break

            if not records:
                logger.info("Page %d is empty; show index exhausted", page)
                end_reached = True
                break

            shows = [Show(id=record.id, name=record.name) for record in records]
            set_last_show_id(self.store, shows[-1].id)
            append_shows(self.store, shows)
            logger.info("Fetched %d shows - page %d", len(shows), page)

            pages_fetched += 1
            shows_added += len(shows)
            page += 1

            self.rate_limiter.wait(CATALOG)

        backfill: BackfillSummary | None = None
        backfill_ran = False
        if end_reached and self.backfiller is not None:
            backfill = self.backfiller.run()
            backfill_ran = True

        return CrawlSummary(
            start_page=start_page,
            pages_fetched=pages_fetched,
            shows_added=shows_added,
            end_reached=end_reached,
            last_page=page - 1 if pages_fetched else None,
            backfill_ran=backfill_ran,
            error=error,
            backfill=backfill,
        )
