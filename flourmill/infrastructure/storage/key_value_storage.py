"""Key-value storage adapters for the local record backend.

Storage layout (``JsonFileKeyValueStorage``):
    <storage_dir>/<sanitised key>.json   — one text blob per key
"""

import logging
import os
import re
import tempfile
from pathlib import Path

from flourmill.application.interfaces import KeyValueStorage

logger = logging.getLogger(__name__)


def _sanitise(name: str, max_len: int = 120) -> str:
    """Replace non-word characters with underscores and truncate."""
    return re.sub(r"[^\w\-]", "_", name)[:max_len].strip("_") or "unnamed"


class JsonFileKeyValueStorage(KeyValueStorage):
    """Infrastructure adapter keeping each key in its own file on disk.

    Writes go to a temporary file in the same directory and are then renamed
    over the target, so a crash mid-write never leaves a truncated blob.
    """

    def __init__(self, storage_dir: str | Path):
        self._storage_dir = Path(storage_dir)
        self._storage_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        return self._storage_dir / f"{_sanitise(key)}.json"

    async def get(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text("utf-8")

    async def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._storage_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(value)
            os.replace(tmp_name, path)
        finally:
            Path(tmp_name).unlink(missing_ok=True)
        logger.debug("Wrote %s (%d chars)", path, len(value))

    async def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if not path.exists():
            return False
        path.unlink(missing_ok=True)
        logger.info("Deleted storage key %s", key)
        return True


class InMemoryKeyValueStorage(KeyValueStorage):
    """Process-local storage, for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None
