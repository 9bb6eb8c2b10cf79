"""Process-wide extension runtime.

One ``ExtensionContext`` is created at startup. It owns storage, the
usage ledger, the reply cache, both HTTP clients and, once a page is
attached, the injector. ``aclose()`` releases all of them.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Any

import httpx

from smartreplies.core.config import Settings, get_settings
from smartreplies.core.logging import get_logger
from smartreplies.core.tasks import cancel_tasks, create_background_task
from smartreplies.extension.cache import ReplyCache
from smartreplies.extension.checkout import CheckoutClient, PaymentRedirector
from smartreplies.extension.client import ReplyClient
from smartreplies.extension.dom import Document
from smartreplies.extension.gate import AccessGate
from smartreplies.extension.injector import DomInjector
from smartreplies.extension.models import Preferences, local_now
from smartreplies.extension.notices import Notifier
from smartreplies.extension.preferences import PreferenceStore
from smartreplies.extension.sites import SITE_TABLE, SiteSpec, adapter_for, validate_site_table
from smartreplies.extension.storage import KeyValueStore, create_store
from smartreplies.extension.usage import UsageLedger

logger = get_logger(__name__)

SETTINGS_SAVED_NOTICE = "✅ AI settings saved!"


class ExtensionContext:
    """Wires the extension components together."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        store: KeyValueStore | None = None,
        http_client: httpx.AsyncClient | None = None,
        redirector: PaymentRedirector | None = None,
        site_table: tuple[SiteSpec, ...] = SITE_TABLE,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self.settings = settings or get_settings()
        validate_site_table(site_table)
        self._site_table = site_table

        self.store = store or create_store(self.settings.storage_path)
        self.notifier = Notifier()
        self.preferences = PreferenceStore(self.store)
        self.ledger = UsageLedger(self.store, clock=clock)
        self.gate = AccessGate(self.ledger, self.notifier, self.settings.free_daily_limit)
        self.cache = ReplyCache(ttl=self.settings.reply_cache_ttl_seconds)
        self.reply_client = ReplyClient(
            self.settings.backend_url,
            self.cache,
            retries=self.settings.reply_retries,
            retry_delay=self.settings.reply_retry_delay_seconds,
            timeout=self.settings.request_timeout_seconds,
            http_client=http_client,
        )
        self.checkout = CheckoutClient(
            self.settings.backend_url,
            self.settings.user_id,
            self.gate,
            self.notifier,
            redirector,
            timeout=self.settings.request_timeout_seconds,
            http_client=http_client,
        )
        self.notifier.on_upgrade = self._start_checkout_in_background
        self.injector: DomInjector | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

    def _start_checkout_in_background(self) -> None:
        create_background_task(self.checkout.start_checkout(), name="checkout", registry=self._tasks)

    async def start(self, document: Document) -> DomInjector | None:
        """Attach to a page after syncing Pro status; returns None on unsupported sites."""
        if self.injector is not None:
            raise RuntimeError("extension context already attached to a page")

        adapter = adapter_for(document, self._site_table)
        if adapter is None:
            logger.info("Site not supported, extension idle", hostname=document.hostname)
            return None

        self.notifier.sink = document.show_notice
        await self.ledger.reset_if_new_day()
        await self.checkout.refresh_pro_status()

        self.injector = DomInjector(
            document,
            adapter,
            self.gate,
            self.reply_client,
            self.preferences,
            self.notifier,
            rescan_delay=self.settings.rescan_delay_seconds,
        )
        self.injector.start()
        return self.injector

    async def save_preferences(self, preferences: Preferences) -> None:
        await self.preferences.save(preferences)
        self.notifier.notify(SETTINGS_SAVED_NOTICE)

    async def status(self) -> dict[str, Any]:
        """Tier and remaining quota, as shown in the popup."""
        account = await self.ledger.reset_if_new_day()
        return {
            "isPro": account.is_pro,
            "dailyRepliesUsed": account.daily_replies_used,
            "remaining": await self.gate.remaining(),
        }

    async def aclose(self) -> None:
        """Tear down the page attachment and network clients."""
        if self.injector is not None:
            await self.injector.aclose()
            self.injector = None
        await cancel_tasks(self._tasks)
        self.notifier.sink = None
        await self.reply_client.close()
        await self.checkout.close()
        logger.info("Extension context closed")
