"""Helpers for building signed Stripe webhook deliveries in tests."""

import hashlib
import hmac
import time
from typing import Any

import orjson


def checkout_completed_event(
    event_id: str = "evt_test_1",
    *,
    user_id: str | None = "guest",
    customer: str | None = "cus_test_1",
    session_id: str = "cs_test_1",
    metadata: dict[str, str] | None = None,
) -> dict[str, Any]:
    session: dict[str, Any] = {
        "id": session_id,
        "object": "checkout.session",
        "client_reference_id": user_id,
        "customer": customer,
        "metadata": metadata or {},
        "mode": "subscription",
    }
    return {
        "id": event_id,
        "object": "event",
        "type": "checkout.session.completed",
        "data": {"object": session},
    }


def sign_payload(payload: bytes, secret: str, timestamp: int | None = None) -> str:
    """Build a ``Stripe-Signature`` header value for the payload."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.".encode() + payload
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def encode(event: dict[str, Any]) -> bytes:
    return orjson.dumps(event)
