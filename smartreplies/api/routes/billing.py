"""Checkout, webhook and account status endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from smartreplies.api.deps import DBSession
from smartreplies.api.schemas import (
    AccountStatus,
    CheckoutRequest,
    CheckoutResponse,
    ErrorResponse,
    WebhookAck,
)
from smartreplies.core.logging import get_logger
from smartreplies.services.billing import BillingService, get_billing_service

logger = get_logger(__name__)
router = APIRouter(tags=["Billing"])

Billing = Annotated[BillingService, Depends(get_billing_service)]


@router.post(
    "/create-checkout-session",
    response_model=CheckoutResponse,
    response_model_by_alias=True,
    summary="Create a Pro subscription checkout session",
    responses={500: {"model": ErrorResponse, "description": "Session creation failed"}},
)
async def create_checkout_session(
    request: CheckoutRequest,
    billing: Billing,
) -> CheckoutResponse:
    session = await billing.create_checkout_session(request.user_id)
    return CheckoutResponse(session_id=session.id, url=session.url)


@router.post(
    "/webhook",
    response_model=WebhookAck,
    summary="Receive payment processor events",
    responses={400: {"model": ErrorResponse, "description": "Signature verification failed"}},
)
async def stripe_webhook(
    request: Request,
    db: DBSession,
    billing: Billing,
) -> WebhookAck:
    """
    Verify and apply a Stripe event.

    Replayed deliveries of an already processed event are acknowledged
    without being applied again.
    """
    payload = await request.body()
    event = billing.verify_event(payload, request.headers.get("stripe-signature"))

    outcome = await billing.handle_event(db, event)
    logger.info(
        "Webhook handled",
        event_id=outcome.event_id,
        event_type=outcome.event_type,
        duplicate=outcome.duplicate,
        applied=outcome.applied,
    )
    return WebhookAck(duplicate=outcome.duplicate)


@router.get(
    "/accounts/{user_id}",
    response_model=AccountStatus,
    response_model_by_alias=True,
    summary="Get subscription status",
)
async def get_account_status(
    user_id: str,
    db: DBSession,
    billing: Billing,
) -> AccountStatus:
    """Unknown users are reported as Free."""
    account = await billing.get_account(db, user_id)
    return AccountStatus(user_id=user_id, is_pro=bool(account and account.is_pro))
