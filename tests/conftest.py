"""Test configuration and fixtures.

Provides isolated test fixtures for:
- Database sessions with proper cleanup
- HTTP client with dependency overrides
- Settings with Stripe test credentials
- A fake host page for the extension runtime
"""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from smartreplies.core.config import Settings
from smartreplies.db.models import Base
from smartreplies.db.session import get_db
from smartreplies.extension.dom import TriggerControl
from smartreplies.extension.notices import Notice
from smartreplies.extension.storage import MemoryStore
from smartreplies.main import app
from smartreplies.services.billing import BillingService, get_billing_service
from smartreplies.services.generation import (
    GenerationService,
    TemplateReplyGenerator,
    get_generation_service,
)


# Test database URL (SQLite in-memory with shared cache for proper async behavior)
TEST_DATABASE_URL = "sqlite+aiosqlite:///file::memory:?cache=shared&uri=true"

TEST_WEBHOOK_SECRET = "whsec_test_secret"


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with safe defaults."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        stripe_secret_key="sk_test_123",
        stripe_webhook_secret=TEST_WEBHOOK_SECRET,
        frontend_url="https://frontend.test",
        backend_url="http://backend.test",
        generation_provider="template",
        debug=True,
    )


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine with fresh schema for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session with transaction rollback."""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def billing_service(test_settings: Settings, monkeypatch: pytest.MonkeyPatch) -> BillingService:
    """Billing service configured with Stripe test credentials."""
    monkeypatch.setattr("smartreplies.services.billing.get_settings", lambda: test_settings)
    return BillingService()


@pytest.fixture
def generation_service() -> GenerationService:
    return GenerationService(generator=TemplateReplyGenerator())


# =============================================================================
# HTTP Client Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def client(
    test_db: AsyncSession,
    billing_service: BillingService,
    generation_service: GenerationService,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database and service overrides."""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_billing_service] = lambda: billing_service
    app.dependency_overrides[get_generation_service] = lambda: generation_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Extension Fixtures
# =============================================================================

class FakeElement:
    """Compose field stand-in."""

    def __init__(self, inner_text: str = "", value: str | None = None) -> None:
        self.dataset: dict[str, str] = {}
        self.inner_text = inner_text
        self.value = value

    def __repr__(self) -> str:
        return f"<FakeElement(inner_text={self.inner_text!r}, value={self.value!r})>"


class FakeDocument:
    """In-memory page with selector-indexed fields."""

    def __init__(self, hostname: str = "mail.google.com") -> None:
        self.hostname = hostname
        self.fields: dict[str, list[FakeElement]] = {}
        self.attached: list[tuple[FakeElement, TriggerControl]] = []
        self.notices: list[Notice] = []
        self._observers: list[Callable[[], None]] = []

    def add_field(self, selector: str, element: FakeElement, *, mutate: bool = True) -> FakeElement:
        self.fields.setdefault(selector, []).append(element)
        if mutate:
            self.mutate()
        return element

    def remove_field(self, element: FakeElement) -> None:
        for elements in self.fields.values():
            if element in elements:
                elements.remove(element)
        self.mutate()

    def mutate(self) -> None:
        for callback in list(self._observers):
            callback()

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    @property
    def notice_texts(self) -> list[str]:
        return [n.text for n in self.notices]

    # Document protocol

    def query_selector_all(self, selector: str) -> list[FakeElement]:
        return list(self.fields.get(selector, []))

    def contains(self, element: Any) -> bool:
        return any(element in elements for elements in self.fields.values())

    def attach_control(self, field: Any, control: TriggerControl) -> None:
        self.attached.append((field, control))

    def observe_mutations(self, callback: Callable[[], None]) -> Callable[[], None]:
        self._observers.append(callback)
        return lambda: self._observers.remove(callback)

    def show_notice(self, notice: Notice) -> None:
        self.notices.append(notice)


GMAIL_SELECTOR = "div[aria-label='Message Body']"


@pytest.fixture
def document() -> FakeDocument:
    return FakeDocument("mail.google.com")


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


class FixedClock:
    """Settable wall clock returning aware datetimes."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


class TickClock:
    """Settable monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture
def wall_clock() -> FixedClock:
    return FixedClock()


class RecordingSleep:
    """Async sleep replacement that records delays without waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
