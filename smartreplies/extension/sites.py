"""Supported sites and how to reach their compose fields."""

from dataclasses import dataclass
from typing import Literal

from smartreplies.core.logging import get_logger
from smartreplies.extension.dom import Document, Element

logger = get_logger(__name__)

FieldKind = Literal["contenteditable", "textarea"]


@dataclass(frozen=True)
class SiteSpec:
    hostname: str
    selector: str
    kind: FieldKind = "contenteditable"


# Hostname substring -> compose field selector, matched in order
SITE_TABLE: tuple[SiteSpec, ...] = (
    SiteSpec("mail.google.com", "div[aria-label='Message Body']"),
    SiteSpec("www.linkedin.com", "div.msg-form__contenteditable"),
    SiteSpec("twitter.com", "div[data-testid='tweetTextarea_0']"),
    SiteSpec("www.facebook.com", "div[role='textbox']"),
    SiteSpec("www.reddit.com", "textarea", kind="textarea"),
    SiteSpec("www.youtube.com", "yt-formatted-string[contenteditable='true']"),
)


class SiteTableError(ValueError):
    """The site table is unusable."""


def validate_site_table(table: tuple[SiteSpec, ...] = SITE_TABLE) -> None:
    """Reject empty, duplicate or malformed entries."""
    if not table:
        raise SiteTableError("site table is empty")

    seen: set[str] = set()
    for spec in table:
        if not spec.hostname or spec.hostname != spec.hostname.strip().lower() or " " in spec.hostname:
            raise SiteTableError(f"invalid hostname pattern: {spec.hostname!r}")
        if spec.hostname in seen:
            raise SiteTableError(f"duplicate hostname pattern: {spec.hostname!r}")
        if not spec.selector.strip():
            raise SiteTableError(f"empty selector for {spec.hostname!r}")
        if spec.kind not in ("contenteditable", "textarea"):
            raise SiteTableError(f"unknown field kind for {spec.hostname!r}: {spec.kind!r}")
        seen.add(spec.hostname)


class SiteAdapter:
    """Finds, reads and writes compose fields on one site."""

    def __init__(self, spec: SiteSpec, document: Document) -> None:
        self.spec = spec
        self.document = document

    @property
    def hostname(self) -> str:
        return self.document.hostname

    def find_compose_fields(self) -> list[Element]:
        return list(self.document.query_selector_all(self.spec.selector))

    def read_text(self, field: Element) -> str:
        return field.inner_text or field.value or ""

    def write_text(self, field: Element, text: str) -> None:
        field.inner_text = text
        field.value = text


class ContentEditableAdapter(SiteAdapter):
    """Rich editors keep their text in the element body."""

    def read_text(self, field: Element) -> str:
        return field.inner_text or ""

    def write_text(self, field: Element, text: str) -> None:
        field.inner_text = text


class TextAreaAdapter(SiteAdapter):
    """Plain form controls keep their text in the value."""

    def read_text(self, field: Element) -> str:
        return field.value or ""

    def write_text(self, field: Element, text: str) -> None:
        field.value = text


_ADAPTERS: dict[str, type[SiteAdapter]] = {
    "contenteditable": ContentEditableAdapter,
    "textarea": TextAreaAdapter,
}


def adapter_for(
    document: Document,
    table: tuple[SiteSpec, ...] = SITE_TABLE,
) -> SiteAdapter | None:
    """Return the adapter for the document's host, or None if unsupported."""
    hostname = document.hostname.lower()
    for spec in table:
        if spec.hostname in hostname:
            return _ADAPTERS.get(spec.kind, SiteAdapter)(spec, document)
    logger.debug("Unsupported site", hostname=hostname)
    return None
