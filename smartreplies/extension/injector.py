"""Attaches reply triggers to compose fields and runs the reply flow."""

import asyncio
from typing import Any

from smartreplies.core.logging import get_logger
from smartreplies.core.tasks import cancel_tasks, create_background_task
from smartreplies.extension.client import ReplyClient
from smartreplies.extension.dom import Document, Element, TriggerControl
from smartreplies.extension.errors import GenerationError, TransportError
from smartreplies.extension.gate import AccessGate
from smartreplies.extension.notices import Notifier
from smartreplies.extension.preferences import PreferenceStore
from smartreplies.extension.sites import SiteAdapter

logger = get_logger(__name__)

INJECTED_MARKER = "aiReplyInjected"

EMPTY_MESSAGE_NOTICE = "Please type a message before generating a reply."
NO_REPLY_NOTICE = "AI could not generate a reply. Try again later."
ERROR_NOTICE = "An error occurred while generating the AI reply."


class DomInjector:
    """Keeps exactly one trigger control on every compose field of a page.

    Fields move from unattached to attached once, recorded by a dataset
    marker on the field itself. Scans run at start, on every subtree
    mutation, and once more after ``rescan_delay`` for late-rendering UIs.
    Controls of fields that have left the page are dropped on the next scan.
    """

    def __init__(
        self,
        document: Document,
        adapter: SiteAdapter,
        gate: AccessGate,
        reply_client: ReplyClient,
        preferences: PreferenceStore,
        notifier: Notifier,
        rescan_delay: float = 1.0,
    ) -> None:
        self._document = document
        self._adapter = adapter
        self._gate = gate
        self._reply_client = reply_client
        self._preferences = preferences
        self._notifier = notifier
        self._rescan_delay = rescan_delay

        self._controls: dict[Any, TriggerControl] = {}
        self._tasks: set[asyncio.Task[Any]] = set()
        self._unsubscribe: Any = None
        self._rescan_handle: asyncio.TimerHandle | None = None

    @property
    def controls(self) -> list[TriggerControl]:
        return list(self._controls.values())

    @property
    def running(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> None:
        if self.running:
            return
        self.scan()
        self._unsubscribe = self._document.observe_mutations(self.scan)
        loop = asyncio.get_running_loop()
        self._rescan_handle = loop.call_later(self._rescan_delay, self.scan)
        logger.info("Injector started", hostname=self._adapter.hostname)

    def stop(self) -> None:
        if self._rescan_handle is not None:
            self._rescan_handle.cancel()
            self._rescan_handle = None
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            logger.info("Injector stopped", hostname=self._adapter.hostname)

    async def aclose(self) -> None:
        self.stop()
        await cancel_tasks(self._tasks)

    def scan(self) -> int:
        """Attach controls to fields that have none; return how many were added."""
        for field in [f for f in self._controls if not self._document.contains(f)]:
            del self._controls[field]

        attached = 0
        for field in self._adapter.find_compose_fields():
            if field is None or field.dataset.get(INJECTED_MARKER):
                continue
            control = TriggerControl(field, self._generate_into, self._spawn)
            self._document.attach_control(field, control)
            field.dataset[INJECTED_MARKER] = "true"
            self._controls[field] = control
            attached += 1
        if attached:
            logger.debug("Trigger controls attached", count=attached)
        return attached

    def _spawn(self, coro: Any) -> asyncio.Task[Any]:
        return create_background_task(coro, name="reply-activation", registry=self._tasks)

    def control_for(self, field: Element) -> TriggerControl | None:
        return self._controls.get(field)

    async def handle_keydown(self, element: Element | None, *, ctrl: bool, key: str) -> bool:
        """Ctrl+Enter on an attached field triggers its control."""
        if not (ctrl and key == "Enter") or element is None:
            return False
        if not element.dataset.get(INJECTED_MARKER):
            return False
        preferences = await self._preferences.load()
        if not preferences.enable_keyboard_shortcut:
            return False
        control = self.control_for(element)
        if control is None:
            return False
        await self.activate(control)
        return True

    async def activate(self, control: TriggerControl) -> None:
        """Generate a reply for the control's field and write it back."""
        if not control.begin():
            logger.debug("Activation ignored, request pending")
            return
        try:
            await self._generate_into(control)
        finally:
            control.finish()

    async def _generate_into(self, control: TriggerControl) -> None:
        field = control.field
        message = self._adapter.read_text(field)
        if not message.strip():
            self._notifier.notify(EMPTY_MESSAGE_NOTICE)
            return

        control.set_loading(True)
        try:
            if not await self._gate.can_generate_reply():
                return

            preferences = await self._preferences.load()
            try:
                reply = await self._reply_client.get_reply(
                    message, preferences, site=self._adapter.hostname
                )
            except GenerationError as e:
                await self._gate.release()
                logger.warning("Reply not delivered", reason=e.reason)
                self._notifier.notify(
                    ERROR_NOTICE if isinstance(e, TransportError) else NO_REPLY_NOTICE
                )
                return

            if not self._document.contains(field):
                await self._gate.release()
                logger.info("Compose field detached, discarding reply")
                return

            self._adapter.write_text(field, reply)
        finally:
            control.set_loading(False)
