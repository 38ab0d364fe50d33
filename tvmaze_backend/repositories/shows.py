from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from tvmaze_backend.db.store import FileKeyValueStore
from tvmaze_backend.models.shows import Show, ShowRecordError

SHOWS_KEY = "shows"


class ShowRepositoryError(RuntimeError):
    pass


def load_show_rows(store: FileKeyValueStore) -> list[dict[str, Any]] | None:
    """
    Raw stored rows, or None when nothing has been persisted yet.
    """

    data = store.get_item(SHOWS_KEY)
    if data is None:
        return None
    if not isinstance(data, list):
        raise ShowRepositoryError(f"Stored value under {SHOWS_KEY!r} is not a list.")
    return data


def load_shows(store: FileKeyValueStore) -> list[Show]:
    rows = load_show_rows(store) or []
    try:
        return [Show.from_dict(row) for row in rows]
    except ShowRecordError as exc:
        raise ShowRepositoryError(str(exc)) from exc


def save_shows(store: FileKeyValueStore, shows: Iterable[Show]) -> None:
    store.set_item(SHOWS_KEY, [show.to_dict() for show in shows])


def append_shows(store: FileKeyValueStore, shows: Iterable[Show]) -> int:
    """
    Read-modify-write append. No dedup: callers must not hand in a page twice.

    Returns the new collection size.
    """

    existing = load_show_rows(store) or []
    combined = existing + [show.to_dict() for show in shows]
    store.set_item(SHOWS_KEY, combined)
    return len(combined)
