"""Daily usage ledger backed by local storage."""

from collections.abc import Callable
from datetime import datetime

from pydantic import ValidationError

from smartreplies.core.logging import get_logger
from smartreplies.extension.models import UserAccount, local_now
from smartreplies.extension.storage import KeyValueStore

logger = get_logger(__name__)

ACCOUNT_KEY = "aiSmartRepliesUser"


class UsageLedger:
    """Persists the UserAccount record and applies the day-boundary reset.

    The ledger does no locking of its own; read-modify-write sequences are
    serialized by the AccessGate that owns it.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self._store = store
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    async def load(self) -> UserAccount:
        """Load the account, creating defaults on first access."""
        raw = await self._store.get(ACCOUNT_KEY)
        if raw is not None:
            try:
                return UserAccount.model_validate(raw)
            except ValidationError as e:
                logger.warning("Stored account invalid, recreating", error=str(e))

        account = UserAccount(last_reset=self.now())
        await self.save(account)
        return account

    async def save(self, account: UserAccount) -> None:
        await self._store.set(ACCOUNT_KEY, account.model_dump(by_alias=True, mode="json"))

    def is_new_day(self, account: UserAccount) -> bool:
        now = self.now()
        last = account.last_reset
        if last.tzinfo is not None and now.tzinfo is not None:
            last = last.astimezone(now.tzinfo)
        return last.date() != now.date()

    async def reset_if_new_day(self) -> UserAccount:
        """Zero the daily counter once per calendar-day transition."""
        account = await self.load()
        if self.is_new_day(account):
            logger.info(
                "Daily usage reset",
                previous_count=account.daily_replies_used,
                last_reset=account.last_reset.isoformat(),
            )
            account.daily_replies_used = 0
            account.last_reset = self.now()
            await self.save(account)
        return account

