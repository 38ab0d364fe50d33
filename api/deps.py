"""
Dependency injection for the key-value store and other shared resources.
"""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from tvmaze_backend.db.store import FileKeyValueStore, StoreError
from tvmaze_backend.repositories.shows import ShowRepositoryError, load_show_rows

logger = logging.getLogger(__name__)


def get_store(request: Request) -> FileKeyValueStore:
    """
    Returns the store opened by the application lifespan.
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Storage is not initialised")
    return store


Store = Annotated[FileKeyValueStore, Depends(get_store)]


def read_show_rows(store: FileKeyValueStore) -> list[dict] | None:
    """
    Load stored show rows, mapping storage failures to a 502.

    Returns None when nothing has been ingested yet.
    """
    try:
        return load_show_rows(store)
    except (StoreError, ShowRepositoryError) as exc:
        logger.error("Storage error while reading shows: %s", exc)
        raise HTTPException(status_code=502, detail="Storage error while reading shows") from exc
