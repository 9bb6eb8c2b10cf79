"""Short-lived reply cache keyed by the raw message text."""

import time
from collections.abc import Callable
from dataclasses import dataclass

REPLY_CACHE_TTL = 60.0  # seconds


@dataclass
class CacheEntry:
    reply: str
    created_at: float


class ReplyCache:
    """In-memory message -> reply map with a fixed freshness window.

    Expired entries are ignored on read but stay stored until the same
    message is cached again. Keys are not normalized.
    """

    def __init__(
        self,
        ttl: float = REPLY_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, message: str) -> str | None:
        entry = self._entries.get(message)
        if entry is not None and self._clock() - entry.created_at < self._ttl:
            return entry.reply
        return None

    def put(self, message: str, reply: str) -> None:
        self._entries[message] = CacheEntry(reply=reply, created_at=self._clock())

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return True

    def __contains__(self, message: object) -> bool:
        return message in self._entries
