from __future__ import annotations

from tvmaze_backend.db.store import FileKeyValueStore

LAST_SHOW_ID_KEY = "lastShowId"


class SyncStateRepositoryError(RuntimeError):
    pass


def get_last_show_id(store: FileKeyValueStore) -> int:
    """
    Highest show id seen in the most recently fetched page (0 before the first crawl).
    """

    value = store.get_item(LAST_SHOW_ID_KEY)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise SyncStateRepositoryError(f"Stored value under {LAST_SHOW_ID_KEY!r} is not an integer: {value!r}")
    return value


def set_last_show_id(store: FileKeyValueStore, show_id: int) -> None:
    store.set_item(LAST_SHOW_ID_KEY, int(show_id))
