"""Tests for notices and the upgrade prompt."""

from smartreplies.extension.notices import (
    NOTICE_TIMEOUT,
    UPGRADE_ACTION,
    UPGRADE_TEXT,
    UPGRADE_TIMEOUT,
    Notice,
    Notifier,
)

from conftest import TickClock


def test_notify_without_sink_is_silent():
    Notifier().notify("hello")


def test_notify_uses_default_timeout():
    notices: list[Notice] = []
    Notifier(sink=notices.append).notify("hello")
    assert notices == [Notice(text="hello", timeout=NOTICE_TIMEOUT)]


def test_upgrade_prompt_carries_action():
    notices: list[Notice] = []
    started: list[bool] = []
    notifier = Notifier(sink=notices.append, clock=TickClock())
    notifier.on_upgrade = lambda: started.append(True)

    assert notifier.show_upgrade_prompt() is True

    notice = notices[0]
    assert (notice.text, notice.kind, notice.timeout) == (UPGRADE_TEXT, "upgrade", UPGRADE_TIMEOUT)
    assert notice.action_label == UPGRADE_ACTION
    notice.action()
    assert started == [True]


def test_upgrade_prompt_shown_again_after_timeout():
    notices: list[Notice] = []
    clock = TickClock()
    notifier = Notifier(sink=notices.append, clock=clock)

    assert notifier.show_upgrade_prompt() is True
    clock.advance(UPGRADE_TIMEOUT - 1)
    assert notifier.show_upgrade_prompt() is False
    clock.advance(2)
    assert notifier.show_upgrade_prompt() is True
    assert len(notices) == 2
