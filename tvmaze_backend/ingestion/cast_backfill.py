from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Protocol

from tvmaze_backend.db.store import FileKeyValueStore
from tvmaze_backend.integrations.tvmaze.client import TvmazeClientError
from tvmaze_backend.integrations.tvmaze.schemas import TvmazeCastCredit
from tvmaze_backend.models.shows import CastMember, Show
from tvmaze_backend.repositories.shows import load_shows, save_shows
from tvmaze_backend.utils.rate_limit import ENRICHMENT, RateLimiter

logger = logging.getLogger(__name__)


class CastSource(Protocol):
    def fetch_show_cast(self, show_id: int) -> list[TvmazeCastCredit]: ...


@dataclass(frozen=True)
class BackfillFailure:
    show_id: int
    name: str


@dataclass(frozen=True)
class BackfillSummary:
    candidates: int
    updated: int
    failed: int
    failures: list[BackfillFailure] = field(default_factory=list)


def _parse_birthday(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def _birthday_sort_key(member: CastMember) -> tuple[int, date]:
    parsed = _parse_birthday(member.birthday)
    if parsed is None:
        return (1, date.min)
    return (0, parsed)


def sort_cast_by_birthday(members: Iterable[CastMember]) -> list[CastMember]:
    """
    Oldest first. Missing or unparseable birthdays sort last; ties keep upstream order.
    """

    return sorted(members, key=_birthday_sort_key)


def build_cast(credits: Iterable[TvmazeCastCredit]) -> tuple[CastMember, ...]:
    members = [
        CastMember(id=credit.person.id, name=credit.person.name, birthday=credit.person.birthday)
        for credit in credits
    ]
    return tuple(sort_cast_by_birthday(members))


def fetch_cast_for_show(client: CastSource, show: Show) -> Show:
    """
    Return `show` with its cast attached.

    On upstream failure the error is logged and the show comes back with whatever
    cast it had before the call, so it stays a backfill candidate.
    """

    try:
        credits = client.fetch_show_cast(show.id)
    except TvmazeClientError as exc:
        logger.error("Error fetching cast for show %s: %s", show.id, exc)
        return replace(show)

    logger.info("Fetched cast for show #%s", show.id)
    return replace(show, cast=build_cast(credits))


class CastBackfiller:
    def __init__(
        self,
        store: FileKeyValueStore,
        client: CastSource,
        rate_limiter: RateLimiter,
    ) -> None:
        self.store = store
        self.client = client
        self.rate_limiter = rate_limiter

    def run(self) -> BackfillSummary:
        shows = load_shows(self.store)
        logger.info("Updating casts for %d stored shows", len(shows))

        candidates = 0
        updated = 0
        failures: list[BackfillFailure] = []
        for index, show in enumerate(shows):
            if not show.needs_cast:
                continue
            candidates += 1

            result = fetch_cast_for_show(self.client, show)
            if result.needs_cast:
                failures.append(BackfillFailure(show_id=show.id, name=show.name))
            else:
                updated += 1

            # Whole snapshot is written back after every show.
            shows[index] = result
            save_shows(self.store, shows)

            self.rate_limiter.wait(ENRICHMENT)

        logger.info(
            "Done fetching casts: candidates=%d updated=%d failed=%d",
            candidates,
            updated,
            len(failures),
        )
        return BackfillSummary(candidates=candidates, updated=updated, failed=len(failures), failures=failures)
