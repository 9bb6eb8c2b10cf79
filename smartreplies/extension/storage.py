"""Async key-value storage for extension state.

Values are JSON-compatible objects keyed by fixed logical names. The
in-memory store lives for one page load; the file store survives restarts.
"""

import asyncio
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import orjson

from smartreplies.core.logging import get_logger

logger = get_logger(__name__)


class KeyValueStore(ABC):
    """Abstract persistent key-value storage."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the stored value, or None when absent."""
        ...

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value under key."""
        ...


class MemoryStore(KeyValueStore):
    """Dictionary-backed store."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, bytes] = {
            key: orjson.dumps(value) for key, value in (initial or {}).items()
        }

    async def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        # Round-trip through JSON so callers never share mutable state
        return orjson.loads(raw) if raw is not None else None

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = orjson.dumps(value)


class JsonFileStore(KeyValueStore):
    """Single JSON document on disk, rewritten atomically on every set.

    The file is re-read on every access so writes from other processes
    sharing the path (e.g. the status command) are not overwritten.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = orjson.loads(self._path.read_bytes())
        except orjson.JSONDecodeError:
            logger.warning("Local storage file is corrupt, starting empty", path=str(self._path))
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))
        os.replace(tmp, self._path)

    async def _load(self) -> dict[str, Any]:
        return await asyncio.to_thread(self._read)

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            data = await self._load()
        return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = await self._load()
            data[key] = orjson.loads(orjson.dumps(value))
            await asyncio.to_thread(self._write, data)


def create_store(path: str = "") -> KeyValueStore:
    """File store when a path is configured, memory store otherwise."""
    if path:
        logger.info("Using file storage", path=path)
        return JsonFileStore(path)
    return MemoryStore()
