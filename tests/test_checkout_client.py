"""Tests for the extension checkout client."""

import httpx
import pytest

from smartreplies.extension.checkout import (
    CHECKOUT_ERROR_NOTICE,
    CHECKOUT_FAILED_NOTICE,
    PRO_ACTIVATED_NOTICE,
    BrowserRedirector,
    CheckoutClient,
    PaymentRedirector,
)
from smartreplies.extension.errors import PaymentSessionError
from smartreplies.extension.gate import AccessGate
from smartreplies.extension.notices import Notice, Notifier
from smartreplies.extension.storage import MemoryStore
from smartreplies.extension.usage import UsageLedger

from conftest import FixedClock

pytestmark = pytest.mark.asyncio

BACKEND = "http://backend.test"


class RecordingRedirector(PaymentRedirector):
    def __init__(self, error: Exception | None = None) -> None:
        self.redirects: list[tuple[str, str | None]] = []
        self.error = error

    async def redirect(self, session_id: str, url: str | None) -> None:
        if self.error:
            raise self.error
        self.redirects.append((session_id, url))


@pytest.fixture
def notices() -> list[Notice]:
    return []


@pytest.fixture
def ledger(store: MemoryStore, wall_clock: FixedClock) -> UsageLedger:
    return UsageLedger(store, clock=wall_clock)


def _checkout(handler, ledger: UsageLedger, notices: list[Notice], redirector=None) -> CheckoutClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BACKEND)
    notifier = Notifier(sink=notices.append)
    return CheckoutClient(
        BACKEND,
        "u-1",
        AccessGate(ledger, notifier),
        notifier,
        redirector or RecordingRedirector(),
        http_client=http,
    )


async def _mark_pro(ledger: UsageLedger) -> None:
    account = await ledger.load()
    account.is_pro = True
    await ledger.save(account)


# =============================================================================
# start_checkout
# =============================================================================


async def test_redirects_to_session(ledger, notices):
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"sessionId": "cs_1", "url": "https://checkout.stripe.com/cs_1"})

    redirector = RecordingRedirector()
    checkout = _checkout(handler, ledger, notices, redirector)

    assert await checkout.start_checkout() == "cs_1"
    assert redirector.redirects == [("cs_1", "https://checkout.stripe.com/cs_1")]
    assert requests[0].url.path == "/create-checkout-session"
    assert b'"u-1"' in requests[0].read()
    assert notices == []


async def test_missing_session_id_notifies(ledger, notices):
    checkout = _checkout(lambda r: httpx.Response(500, json={"error": {"message": "x"}}), ledger, notices)
    assert await checkout.start_checkout() is None
    assert [n.text for n in notices] == [CHECKOUT_FAILED_NOTICE]


async def test_network_error_notifies(ledger, notices):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    checkout = _checkout(handler, ledger, notices)
    assert await checkout.start_checkout() is None
    assert [n.text for n in notices] == [CHECKOUT_ERROR_NOTICE]


async def test_redirect_failure_notifies(ledger, notices):
    redirector = RecordingRedirector(error=PaymentSessionError("no browser"))
    checkout = _checkout(
        lambda r: httpx.Response(200, json={"sessionId": "cs_1", "url": None}), ledger, notices, redirector
    )
    assert await checkout.start_checkout() is None
    assert [n.text for n in notices] == [CHECKOUT_ERROR_NOTICE]


async def test_browser_redirector_requires_url():
    with pytest.raises(PaymentSessionError):
        await BrowserRedirector().redirect("cs_1", None)


# =============================================================================
# refresh_pro_status
# =============================================================================


async def test_refresh_marks_pro_and_notifies_once(ledger, notices):
    checkout = _checkout(lambda r: httpx.Response(200, json={"userId": "u-1", "isPro": True}), ledger, notices)

    assert await checkout.refresh_pro_status() is True
    assert await checkout.refresh_pro_status() is True

    assert (await ledger.load()).is_pro is True
    assert [n.text for n in notices] == [PRO_ACTIVATED_NOTICE]


async def test_refresh_clears_lapsed_pro(ledger, notices):
    await _mark_pro(ledger)
    checkout = _checkout(lambda r: httpx.Response(200, json={"userId": "u-1", "isPro": False}), ledger, notices)

    assert await checkout.refresh_pro_status() is False
    assert (await ledger.load()).is_pro is False


async def test_refresh_failure_leaves_ledger(ledger, notices):
    await _mark_pro(ledger)
    checkout = _checkout(lambda r: httpx.Response(503, json={}), ledger, notices)

    assert await checkout.refresh_pro_status() is None
    assert (await ledger.load()).is_pro is True
