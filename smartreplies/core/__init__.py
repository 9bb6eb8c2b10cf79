"""Core module exports."""

from smartreplies.core.config import Settings, get_settings
from smartreplies.core.exceptions import (
    AppException,
    GenerationProviderError,
    PaymentSessionError,
    ValidationError,
    WebhookVerificationError,
)
from smartreplies.core.logging import get_logger, setup_logging

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "get_logger",
    "setup_logging",
    # Exceptions
    "AppException",
    "GenerationProviderError",
    "PaymentSessionError",
    "ValidationError",
    "WebhookVerificationError",
]
