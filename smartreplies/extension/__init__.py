"""Extension runtime exports."""

from smartreplies.extension.cache import ReplyCache
from smartreplies.extension.checkout import BrowserRedirector, CheckoutClient, PaymentRedirector
from smartreplies.extension.client import ReplyClient, fetch_with_retry
from smartreplies.extension.context import ExtensionContext
from smartreplies.extension.dom import Document, Element, TriggerControl
from smartreplies.extension.errors import (
    ExtensionError,
    GenerationError,
    PaymentSessionError,
    TransportError,
)
from smartreplies.extension.gate import AccessGate
from smartreplies.extension.injector import DomInjector
from smartreplies.extension.models import Preferences, UserAccount
from smartreplies.extension.notices import Notice, Notifier
from smartreplies.extension.preferences import PreferenceStore
from smartreplies.extension.sites import SITE_TABLE, SiteAdapter, SiteSpec, adapter_for
from smartreplies.extension.storage import JsonFileStore, KeyValueStore, MemoryStore
from smartreplies.extension.usage import UsageLedger

__all__ = [
    # Runtime
    "ExtensionContext",
    "DomInjector",
    "TriggerControl",
    "Document",
    "Element",
    # Sites
    "SITE_TABLE",
    "SiteAdapter",
    "SiteSpec",
    "adapter_for",
    # State
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "Preferences",
    "PreferenceStore",
    "UserAccount",
    "UsageLedger",
    "AccessGate",
    "ReplyCache",
    # Network
    "ReplyClient",
    "fetch_with_retry",
    "CheckoutClient",
    "PaymentRedirector",
    "BrowserRedirector",
    # Notices
    "Notice",
    "Notifier",
    # Errors
    "ExtensionError",
    "GenerationError",
    "TransportError",
    "PaymentSessionError",
]
