"""Abstract base class for event log storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseLogBackend(ABC):
    """Async key/value storage holding one JSON array per key.

    Implementations raise ``StorageReadError``/``StorageWriteError`` on
    failure and never retry.
    """

    @abstractmethod
    async def load(self, key: str) -> list[dict]:
        """Return the stored array, or an empty list if the key is unset."""
        ...

    @abstractmethod
    async def save(self, key: str, events: list[dict]) -> None:
        """Replace the stored array atomically."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the key. Missing keys are not an error."""
        ...
