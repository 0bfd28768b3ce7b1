"""Process-local storage backend."""

from __future__ import annotations

import copy

from activity_collector.store.base import BaseLogBackend


class MemoryLogBackend(BaseLogBackend):
    """Keeps arrays in a dict. Values are deep-copied in and out."""

    def __init__(self, initial: dict[str, list[dict]] | None = None):
        self._data: dict[str, list[dict]] = copy.deepcopy(initial) if initial else {}

    async def load(self, key: str) -> list[dict]:
        return copy.deepcopy(self._data.get(key, []))

    async def save(self, key: str, events: list[dict]) -> None:
        self._data[key] = copy.deepcopy(events)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)
