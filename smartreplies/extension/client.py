"""HTTP client for the reply generation endpoint.

Uses a persistent httpx.AsyncClient for connection reuse, created lazily
on first request.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from smartreplies.core.logging import get_logger
from smartreplies.extension.cache import ReplyCache
from smartreplies.extension.errors import GenerationError, TransportError
from smartreplies.extension.models import Preferences

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


async def fetch_with_retry(
    fetch: Callable[[], Awaitable[str]],
    *,
    retries: int = 2,
    delay: float = 1.0,
    sleep: Sleep = asyncio.sleep,
) -> str:
    """Call fetch up to ``retries + 1`` times with a fixed delay between tries.

    Every GenerationError is retried. The last one propagates.
    """
    attempts = retries + 1
    attempt = 1
    while True:
        try:
            return await fetch()
        except GenerationError as e:
            if attempt >= attempts:
                logger.error("Reply generation failed", attempts=attempts, reason=e.reason)
                raise
            logger.warning(
                "Reply generation failed, retrying...",
                attempt=attempt,
                reason=e.reason,
            )
        await sleep(delay)
        attempt += 1


class ReplyClient:
    """Fetches reply suggestions, consulting the reply cache first."""

    def __init__(
        self,
        backend_url: str,
        cache: ReplyCache,
        *,
        retries: int = 2,
        retry_delay: float = 1.0,
        timeout: float = 15.0,
        http_client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._backend_url = backend_url.rstrip("/")
        self._cache = cache
        self._retries = retries
        self._retry_delay = retry_delay
        self._timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None
        self._sleep = sleep

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._backend_url,
                timeout=httpx.Timeout(self._timeout, connect=5.0),
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch_reply(self, message: str, tone: str, length: str, site: str) -> str:
        """Issue one generation request.

        Raises:
            TransportError: If the backend is unreachable
            GenerationError: If the response carries no reply
        """
        client = await self._get_client()
        try:
            response = await client.post(
                "/generate-reply",
                json={"message": message, "tone": tone, "length": length, "site": site},
            )
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__) from e

        try:
            data = response.json()
        except ValueError:
            raise GenerationError(f"invalid response body (HTTP {response.status_code})")

        reply = data.get("reply") if isinstance(data, dict) else None
        if not isinstance(reply, str) or not reply.strip():
            error = data.get("error") if isinstance(data, dict) else None
            if isinstance(error, dict):
                error = error.get("message")
            raise GenerationError(str(error or f"no reply (HTTP {response.status_code})"))
        return reply

    async def get_reply(self, message: str, preferences: Preferences, site: str) -> str:
        """Return a cached reply or fetch a new one with retries."""
        cached = self._cache.get(message)
        if cached is not None:
            logger.debug("Reply cache hit", site=site)
            return cached

        logger.info(
            "Generating reply",
            tone=preferences.tone,
            length=preferences.reply_length,
            site=site,
        )
        reply = await fetch_with_retry(
            lambda: self.fetch_reply(message, preferences.tone, preferences.reply_length, site),
            retries=self._retries,
            delay=self._retry_delay,
            sleep=self._sleep,
        )
        self._cache.put(message, reply)
        return reply
