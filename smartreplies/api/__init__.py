"""API module exports."""

from smartreplies.api.deps import DBSession
from smartreplies.api.routes import billing_router, health_router, replies_router

__all__ = [
    # Routers
    "billing_router",
    "health_router",
    "replies_router",
    # Dependencies
    "DBSession",
]
