"""JSON-file storage backend, one file per storage key."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from activity_collector.exceptions import ConfigError, StorageReadError, StorageWriteError
from activity_collector.store.base import BaseLogBackend

logger = logging.getLogger(__name__)


class JsonFileLogBackend(BaseLogBackend):
    """Store each key as ``<directory>/<key>.json``.

    Writes go to a temporary file in the same directory which then replaces
    the target, so readers never observe a partial array. Blocking file I/O
    runs in a worker thread.
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory).expanduser()

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ConfigError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    async def load(self, key: str) -> list[dict]:
        return await asyncio.to_thread(self._load_sync, key)

    async def save(self, key: str, events: list[dict]) -> None:
        await asyncio.to_thread(self._save_sync, key, events)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._delete_sync, key)

    def _load_sync(self, key: str) -> list[dict]:
        path = self.path_for(key)
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            raise StorageReadError(f"Cannot read event log {path}: {e}") from e
        if not isinstance(data, list):
            raise StorageReadError(
                f"Event log {path} must contain a JSON array, got {type(data).__name__}"
            )
        return data

    def _save_sync(self, key: str, events: list[dict]) -> None:
        path = self.path_for(key)
        tmp_path: Path | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.directory,
                prefix=f".{key}-",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = Path(tmp.name)
                json.dump(events, tmp, ensure_ascii=False, separators=(",", ":"))
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise StorageWriteError(f"Cannot write event log {path}: {e}") from e
        logger.debug("Wrote %d events to %s", len(events), path)

    def _delete_sync(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Cannot delete event log {path}: {e}") from e
