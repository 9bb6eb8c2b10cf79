"""User-visible notices and the upgrade prompt."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from smartreplies.core.logging import get_logger

logger = get_logger(__name__)

UPGRADE_TEXT = "Upgrade to AI Smart Replies Pro for Unlimited Replies!"
UPGRADE_ACTION = "Upgrade Now"

NOTICE_TIMEOUT = 3.0
UPGRADE_TIMEOUT = 10.0


@dataclass
class Notice:
    text: str
    kind: Literal["info", "upgrade"] = "info"
    timeout: float = NOTICE_TIMEOUT
    action_label: str | None = None
    action: Callable[[], Any] | None = None


NoticeSink = Callable[[Notice], None]


class Notifier:
    """Routes notices to the host page.

    Until a sink is attached notices are only logged. At most one upgrade
    prompt is visible at a time.
    """

    def __init__(
        self,
        sink: NoticeSink | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.sink = sink
        self.on_upgrade: Callable[[], Any] | None = None
        self._clock = clock
        self._upgrade_visible_until = float("-inf")

    def _emit(self, notice: Notice) -> None:
        logger.info("Notice", kind=notice.kind, text=notice.text)
        if self.sink is not None:
            self.sink(notice)

    def notify(self, text: str) -> None:
        self._emit(Notice(text=text))

    def show_upgrade_prompt(self) -> bool:
        """Show the upgrade banner unless one is already on screen."""
        now = self._clock()
        if now < self._upgrade_visible_until:
            return False
        self._upgrade_visible_until = now + UPGRADE_TIMEOUT
        self._emit(
            Notice(
                text=UPGRADE_TEXT,
                kind="upgrade",
                timeout=UPGRADE_TIMEOUT,
                action_label=UPGRADE_ACTION,
                action=self.on_upgrade,
            )
        )
        return True
