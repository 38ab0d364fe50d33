"""
Durable storage for the ingestion pipeline and the read API.
"""

from tvmaze_backend.db.store import FileKeyValueStore, StoreError

__all__ = [
    "FileKeyValueStore",
    "StoreError",
]
