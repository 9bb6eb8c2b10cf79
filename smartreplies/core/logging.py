"""Structured logging configuration using structlog.

The backend and the extension runtime share one configuration: JSON lines
in production, colored console output in debug mode. Every event carries
the component that emitted it.
"""

import logging
import re
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor

from smartreplies.core.config import get_settings

Component = Literal["backend", "extension"]

# Stripe secret/restricted keys and webhook signing secrets
_SECRET_PATTERN = re.compile(r"\b(sk|rk|whsec)_(live_|test_)?[A-Za-z0-9]+")

_NOISY_LOGGERS = (
    "uvicorn.access",
    "httpx",
    "httpcore",
    "stripe",
    "openai",
    "google_genai.models",
)


class _ComponentContext:
    def __init__(self, component: Component) -> None:
        self.component = component

    def __call__(self, logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
        settings = get_settings()
        event_dict["app"] = settings.app_name
        event_dict["version"] = settings.app_version
        event_dict["component"] = self.component
        return event_dict


def mask_secrets(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask Stripe credentials that end up in log values, e.g. via SDK errors."""
    for key, value in event_dict.items():
        if isinstance(value, str) and ("sk_" in value or "rk_" in value or "whsec_" in value):
            event_dict[key] = _SECRET_PATTERN.sub(lambda m: f"{m.group(1)}_***", value)
    return event_dict


def setup_logging(component: Component = "backend") -> None:
    """Configure structured logging for the backend or the extension runtime."""
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _ComponentContext(component),
        mask_secrets,
    ]

    if settings.debug:
        processors: list[Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if settings.db_echo else logging.WARNING
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
