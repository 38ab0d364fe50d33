"""
Repository layer for store access patterns.
"""

from tvmaze_backend.repositories.shows import (
    SHOWS_KEY,
    ShowRepositoryError,
    append_shows,
    load_show_rows,
    load_shows,
    save_shows,
)
from tvmaze_backend.repositories.sync_state import (
    LAST_SHOW_ID_KEY,
    get_last_show_id,
    set_last_show_id,
)

__all__ = [
    "LAST_SHOW_ID_KEY",
    "SHOWS_KEY",
    "ShowRepositoryError",
    "append_shows",
    "get_last_show_id",
    "load_show_rows",
    "load_shows",
    "save_shows",
    "set_last_show_id",
]
