"""Free/Pro access gate for reply generation."""

import asyncio

from smartreplies.core.logging import get_logger
from smartreplies.extension.notices import Notifier
from smartreplies.extension.usage import UsageLedger

logger = get_logger(__name__)

FREE_DAILY_LIMIT = 10


class AccessGate:
    """Decides whether a new reply may be generated.

    A successful check on a Free account reserves one unit of the daily
    quota. Callers hand the unit back with ``release()`` when the reply
    never reaches the page, so only delivered replies count. Every
    read-modify-write of the ledger happens under one lock.
    """

    def __init__(
        self,
        ledger: UsageLedger,
        notifier: Notifier,
        daily_limit: int = FREE_DAILY_LIMIT,
    ) -> None:
        self._ledger = ledger
        self._notifier = notifier
        self._limit = daily_limit
        self._lock = asyncio.Lock()

    @property
    def daily_limit(self) -> int:
        return self._limit

    async def can_generate_reply(self) -> bool:
        async with self._lock:
            account = await self._ledger.reset_if_new_day()

            if account.is_pro:
                return True

            if account.daily_replies_used < self._limit:
                account.daily_replies_used += 1
                await self._ledger.save(account)
                logger.debug(
                    "Reply quota reserved",
                    used=account.daily_replies_used,
                    limit=self._limit,
                )
                return True

        logger.info("Daily reply limit reached", limit=self._limit)
        self._notifier.show_upgrade_prompt()
        return False

    async def release(self) -> None:
        """Return one reserved unit after a failed generation."""
        async with self._lock:
            account = await self._ledger.reset_if_new_day()
            if account.is_pro or account.daily_replies_used == 0:
                return
            account.daily_replies_used -= 1
            await self._ledger.save(account)
            logger.debug("Reply quota released", used=account.daily_replies_used)

    async def remaining(self) -> int | None:
        """Replies left today, or None for Pro accounts."""
        async with self._lock:
            account = await self._ledger.reset_if_new_day()
        if account.is_pro:
            return None
        return max(0, self._limit - account.daily_replies_used)

    async def set_pro(self, is_pro: bool = True) -> bool:
        """Record the subscription tier; True when it changed."""
        async with self._lock:
            account = await self._ledger.load()
            if account.is_pro == is_pro:
                return False
            account.is_pro = is_pro
            await self._ledger.save(account)
        logger.info("Tier updated", is_pro=is_pro)
        return True
