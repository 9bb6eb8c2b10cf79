"""Services module exports."""

from smartreplies.services.billing import (
    BillingService,
    CheckoutSession,
    WebhookOutcome,
    get_billing_service,
)
from smartreplies.services.generation import (
    GenerationService,
    ReplyGenerator,
    get_generation_service,
)

__all__ = [
    # Billing
    "BillingService",
    "CheckoutSession",
    "WebhookOutcome",
    "get_billing_service",
    # Generation
    "GenerationService",
    "ReplyGenerator",
    "get_generation_service",
]
