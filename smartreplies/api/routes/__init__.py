"""Routes module exports."""

from smartreplies.api.routes.billing import router as billing_router
from smartreplies.api.routes.health import router as health_router
from smartreplies.api.routes.replies import router as replies_router

__all__ = [
    "billing_router",
    "health_router",
    "replies_router",
]
