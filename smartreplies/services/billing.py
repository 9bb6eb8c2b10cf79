"""Stripe billing: checkout sessions and webhook fulfillment.

Webhook fulfillment is idempotent. Every processed event id is stored in
``webhook_events`` inside the same transaction that applies its effects, so
a replayed or concurrently delivered event is acknowledged without being
applied twice.
"""

import asyncio
from dataclasses import dataclass
from typing import Any

import orjson
import stripe
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smartreplies.core.config import get_settings
from smartreplies.core.exceptions import PaymentSessionError, WebhookVerificationError
from smartreplies.core.logging import get_logger
from smartreplies.db.models import Account, WebhookEvent

logger = get_logger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


@dataclass
class CheckoutSession:
    """Identifier and hosted URL of a created checkout session."""

    id: str
    url: str | None = None


@dataclass
class WebhookOutcome:
    """Result of handling one webhook event."""

    event_id: str
    event_type: str
    duplicate: bool = False
    applied: bool = False
    user_id: str | None = None


class BillingService:
    """Creates checkout sessions and applies payment events."""

    def __init__(self) -> None:
        settings = get_settings()
        self._secret_key = settings.stripe_secret_key
        self._webhook_secret = settings.stripe_webhook_secret
        self._price_id = settings.stripe_price_id
        self._success_url = settings.checkout_success_url
        self._cancel_url = settings.checkout_cancel_url

        if not self._secret_key:
            logger.warning("Stripe secret key not configured, checkout disabled")

    async def create_checkout_session(self, user_id: str) -> CheckoutSession:
        """Create a subscription-mode checkout session for the Pro plan.

        Raises:
            PaymentSessionError: If Stripe is not configured or rejects the request
        """
        if not self._secret_key:
            raise PaymentSessionError("Payment processor is not configured.")

        try:
            session = await asyncio.to_thread(
                stripe.checkout.Session.create,
                api_key=self._secret_key,
                payment_method_types=["card"],
                mode="subscription",
                line_items=[{"price": self._price_id, "quantity": 1}],
                success_url=self._success_url,
                cancel_url=self._cancel_url,
                client_reference_id=user_id,
                metadata={"user_id": user_id},
            )
        except Exception as e:
            logger.error("Stripe checkout error", user_id=user_id, error=str(e))
            raise PaymentSessionError()

        session_id = getattr(session, "id", None)
        if not session_id:
            logger.error("Stripe returned a session without id", user_id=user_id)
            raise PaymentSessionError()

        logger.info("Checkout session created", user_id=user_id, session_id=session_id)
        return CheckoutSession(id=session_id, url=getattr(session, "url", None))

    def verify_event(self, payload: bytes, signature: str | None) -> dict[str, Any]:
        """Verify the Stripe signature and decode the event payload.

        Raises:
            WebhookVerificationError: If the signature or payload is invalid
        """
        if not signature:
            raise WebhookVerificationError("Missing Stripe signature header")
        if not self._webhook_secret:
            raise WebhookVerificationError("Webhook secret not configured")

        try:
            stripe.Webhook.construct_event(payload, signature, self._webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning("Webhook signature verification failed", error=str(e))
            raise WebhookVerificationError(str(e))

        event = orjson.loads(payload)
        if not isinstance(event, dict) or not event.get("id") or not event.get("type"):
            raise WebhookVerificationError("Malformed event payload")
        return event

    async def handle_event(self, db: AsyncSession, event: dict[str, Any]) -> WebhookOutcome:
        """Apply an event once, keyed by its event id."""
        outcome = WebhookOutcome(event_id=event["id"], event_type=event["type"])

        existing = await db.get(WebhookEvent, outcome.event_id)
        if existing is not None:
            logger.info("Duplicate webhook event", event_id=outcome.event_id)
            outcome.duplicate = True
            return outcome

        db.add(WebhookEvent(event_id=outcome.event_id, event_type=outcome.event_type))
        try:
            await db.flush()
        except IntegrityError:
            # Another delivery of the same event committed first
            await db.rollback()
            logger.info("Concurrent duplicate webhook event", event_id=outcome.event_id)
            outcome.duplicate = True
            return outcome

        if outcome.event_type == CHECKOUT_COMPLETED:
            session = (event.get("data") or {}).get("object") or {}
            outcome.user_id = await self._mark_pro(db, session)
            outcome.applied = outcome.user_id is not None
        else:
            logger.debug("Ignoring webhook event", event_type=outcome.event_type)

        return outcome

    async def _mark_pro(self, db: AsyncSession, session: dict[str, Any]) -> str | None:
        """Upsert the paying account with Pro status."""
        customer_id = session.get("customer")
        user_id = session.get("client_reference_id") or (session.get("metadata") or {}).get("user_id")

        if not user_id and customer_id:
            result = await db.execute(
                select(Account).where(Account.stripe_customer_id == customer_id)
            )
            match = result.scalar_one_or_none()
            user_id = match.user_id if match else customer_id

        if not user_id:
            logger.warning("Completed checkout without user reference", session_id=session.get("id"))
            return None

        account = await db.get(Account, user_id)
        if account is None:
            account = Account(user_id=user_id)
            db.add(account)

        account.is_pro = True
        if customer_id:
            account.stripe_customer_id = customer_id
        if session.get("id"):
            account.checkout_session_id = session["id"]

        await db.flush()
        logger.info("Account upgraded to Pro", user_id=user_id, session_id=session.get("id"))
        return user_id

    async def get_account(self, db: AsyncSession, user_id: str) -> Account | None:
        return await db.get(Account, user_id)


# Global billing service instance
_billing_service: BillingService | None = None


def get_billing_service() -> BillingService:
    """Get or create the global billing service instance."""
    global _billing_service

    if _billing_service is None:
        _billing_service = BillingService()

    return _billing_service
