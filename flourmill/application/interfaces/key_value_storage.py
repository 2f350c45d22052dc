"""Abstract key-value storage (port) for text blobs."""

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """Persistent string-to-string storage, in the manner of browser localStorage."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored text, or None if the key was never set."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store text under a key, replacing any previous value."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a key. Returns False if it did not exist."""
        ...
