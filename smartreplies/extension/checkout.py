"""Pro upgrade: checkout hand-off and subscription status sync."""

import asyncio
import webbrowser
from abc import ABC, abstractmethod

import httpx

from smartreplies.core.logging import get_logger
from smartreplies.extension.errors import PaymentSessionError
from smartreplies.extension.gate import AccessGate
from smartreplies.extension.notices import Notifier

logger = get_logger(__name__)

CHECKOUT_FAILED_NOTICE = "Failed to start checkout. Please try again."
CHECKOUT_ERROR_NOTICE = "An error occurred. Please try again."
PRO_ACTIVATED_NOTICE = "🎉 You are now an AI Smart Replies Pro user!"


class PaymentRedirector(ABC):
    """Hands a checkout session to the payment processor's client flow."""

    @abstractmethod
    async def redirect(self, session_id: str, url: str | None) -> None: ...


class BrowserRedirector(PaymentRedirector):
    """Opens the hosted checkout page in the user's browser."""

    async def redirect(self, session_id: str, url: str | None) -> None:
        if not url:
            raise PaymentSessionError(f"no checkout URL for session {session_id}")
        opened = await asyncio.to_thread(webbrowser.open, url)
        if not opened:
            raise PaymentSessionError("no browser available to open checkout")


class CheckoutClient:
    """Starts Pro checkouts and mirrors the backend's Pro flag locally."""

    def __init__(
        self,
        backend_url: str,
        user_id: str,
        gate: AccessGate,
        notifier: Notifier,
        redirector: PaymentRedirector | None = None,
        *,
        timeout: float = 15.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._backend_url = backend_url.rstrip("/")
        self._user_id = user_id
        self._gate = gate
        self._notifier = notifier
        self._redirector = redirector or BrowserRedirector()
        self._timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._backend_url,
                timeout=httpx.Timeout(self._timeout, connect=5.0),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def create_session(self) -> tuple[str, str | None]:
        """Ask the backend for a checkout session.

        Raises:
            PaymentSessionError: If no session id comes back
            httpx.HTTPError: If the backend is unreachable
        """
        client = await self._get_client()
        response = await client.post("/create-checkout-session", json={"userId": self._user_id})
        try:
            data = response.json()
        except ValueError:
            data = None

        session_id = data.get("sessionId") if isinstance(data, dict) else None
        if not session_id:
            raise PaymentSessionError(f"no session id (HTTP {response.status_code})")
        return session_id, data.get("url")

    async def start_checkout(self) -> str | None:
        """Redirect to checkout; returns the session id, or None after a notice."""
        try:
            session_id, url = await self.create_session()
        except PaymentSessionError as e:
            logger.warning("Checkout session missing", error=str(e))
            self._notifier.notify(CHECKOUT_FAILED_NOTICE)
            return None
        except httpx.HTTPError as e:
            logger.error("Checkout request failed", error=str(e))
            self._notifier.notify(CHECKOUT_ERROR_NOTICE)
            return None

        try:
            await self._redirector.redirect(session_id, url)
        except PaymentSessionError as e:
            logger.error("Checkout redirect failed", session_id=session_id, error=str(e))
            self._notifier.notify(CHECKOUT_ERROR_NOTICE)
            return None

        logger.info("Checkout started", session_id=session_id)
        return session_id

    async def refresh_pro_status(self) -> bool | None:
        """Copy the backend's Pro flag into local storage through the gate.

        Returns the flag, or None when the backend could not be asked.
        """
        client = await self._get_client()
        try:
            response = await client.get(f"/accounts/{self._user_id}")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Pro status refresh failed", error=str(e))
            return None

        is_pro = bool(data.get("isPro")) if isinstance(data, dict) else False
        changed = await self._gate.set_pro(is_pro)
        if is_pro and changed:
            self._notifier.notify(PRO_ACTIVATED_NOTICE)
        return is_pro
