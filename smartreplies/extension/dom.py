"""Host page interface and the injected trigger control.

The runtime never touches a real DOM. A host (browser bridge, automation
driver, test fake) implements ``Document`` and ``Element`` and forwards
clicks to ``TriggerControl.click()``.
"""

import asyncio
from collections.abc import Callable, Coroutine, MutableMapping, Sequence
from typing import Any, Protocol

from smartreplies.extension.notices import Notice

IDLE_LABEL = "✨ AI Reply"
LOADING_LABEL = "⏳ Generating..."


class Element(Protocol):
    """A compose field: text area or content-editable element."""

    dataset: MutableMapping[str, str]
    inner_text: str
    value: str | None


class Document(Protocol):
    hostname: str

    def query_selector_all(self, selector: str) -> Sequence[Element]: ...

    def contains(self, element: Element) -> bool: ...

    def attach_control(self, field: Element, control: "TriggerControl") -> None:
        """Place the control next to its field."""
        ...

    def observe_mutations(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call back on any body subtree mutation; returns an unsubscribe function."""
        ...

    def show_notice(self, notice: Notice) -> None: ...


class TriggerControl:
    """The button attached to one compose field."""

    def __init__(
        self,
        field: Element,
        on_activate: Callable[["TriggerControl"], Coroutine[Any, Any, None]],
        spawn: Callable[[Coroutine[Any, Any, None]], "asyncio.Task[Any]"],
    ) -> None:
        self.field = field
        self.label = IDLE_LABEL
        self.disabled = False
        self.opacity = 1.0
        self.pending = False
        self._on_activate = on_activate
        self._spawn = spawn

    def set_loading(self, loading: bool) -> None:
        self.label = LOADING_LABEL if loading else IDLE_LABEL
        self.disabled = loading
        self.opacity = 0.6 if loading else 1.0

    def begin(self) -> bool:
        """Claim the control for one activation; False if one is already pending."""
        if self.disabled or self.pending:
            return False
        self.pending = True
        return True

    def finish(self) -> None:
        self.pending = False

    def click(self) -> "asyncio.Task[Any] | None":
        """Schedule an activation unless one is already pending."""
        if not self.begin():
            return None
        return self._spawn(self._run())

    async def _run(self) -> None:
        try:
            await self._on_activate(self)
        finally:
            self.finish()

    def __repr__(self) -> str:
        return f"<TriggerControl(label={self.label!r}, disabled={self.disabled})>"
