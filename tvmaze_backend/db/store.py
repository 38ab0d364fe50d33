"""
File-backed key-value store.

Each key is persisted as its own JSON file inside the configured directory, named
by the sha256 of the key. Writes go through a temp file and `os.replace` so a
reader never observes a half-written value.
"""
from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when the store cannot be opened, read, or written."""

    pass


def _key_filename(key: str) -> str:
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


class FileKeyValueStore:
    """
    Process-wide get/set store persisted under `directory`.

    Lifecycle: construct, `init()` once at process start, `close()` at shutdown.
    """

    def __init__(self, directory: str | Path, *, encoding: str = "utf-8") -> None:
        self.directory = Path(directory)
        self.encoding = encoding
        self._lock = threading.RLock()
        self._opened = False
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._opened and not self._closed

    def init(self) -> None:
        if self._closed:
            raise StoreError("Store has been closed and cannot be re-initialised.")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError(f"Unable to create store directory {self.directory}: {exc}") from exc
        if not os.access(self.directory, os.W_OK):
            raise StoreError(f"Store directory {self.directory} is not writable.")
        self._opened = True
        logger.info("Opened key-value store at %s", self.directory)

    def close(self) -> None:
        with self._lock:
            self._closed = True
        logger.info("Closed key-value store at %s", self.directory)

    def _require_open(self) -> None:
        if not self._opened:
            raise StoreError("Store is not initialised; call init() first.")
        if self._closed:
            raise StoreError("Store is closed.")

    def _path_for(self, key: str) -> Path:
        if not isinstance(key, str) or not key:
            raise StoreError("Store keys must be non-empty strings.")
        return self.directory / _key_filename(key)

    def get_item(self, key: str) -> Any | None:
        self._require_open()
        path = self._path_for(key)
        with self._lock:
            if not path.is_file():
                return None
            try:
                raw = path.read_text(encoding=self.encoding)
                payload = json.loads(raw)
            except (OSError, ValueError) as exc:
                raise StoreError(f"Unable to read key {key!r} from {path}: {exc}") from exc
        if not isinstance(payload, dict) or payload.get("key") != key:
            raise StoreError(f"Stored file {path} does not hold key {key!r}.")
        return payload.get("value")

    def set_item(self, key: str, value: Any) -> None:
        self._require_open()
        path = self._path_for(key)
        body = json.dumps({"key": key, "value": value}, ensure_ascii=False)
        tmp_path = path.with_name(path.name + ".tmp")
        with self._lock:
            try:
                tmp_path.write_text(body, encoding=self.encoding)
                os.replace(tmp_path, path)
            except OSError as exc:
                raise StoreError(f"Unable to write key {key!r} to {path}: {exc}") from exc

    def remove_item(self, key: str) -> None:
        self._require_open()
        path = self._path_for(key)
        with self._lock:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                raise StoreError(f"Unable to remove key {key!r} at {path}: {exc}") from exc
