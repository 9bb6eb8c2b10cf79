"""Database module exports."""

from smartreplies.db.models import Account, Base, WebhookEvent
from smartreplies.db.session import (
    check_db_health,
    close_db,
    get_db,
    get_engine,
    get_session_factory,
    init_db,
)

__all__ = [
    # Models
    "Base",
    "Account",
    "WebhookEvent",
    # Session management
    "get_db",
    "get_engine",
    "get_session_factory",
    "init_db",
    "close_db",
    "check_db_health",
]
