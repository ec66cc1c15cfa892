"""
Vetlyst Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment is pinned BEFORE any vetlyst import so the module-level
       settings, engine and notification singleton pick up test values.

Fixture Hierarchy:
    ├── mock_db_session:  AsyncMock session for failure-path unit tests
    ├── db_engine:        In-memory aiosqlite engine with all tables created
    ├── db_session:       Real AsyncSession bound to db_engine
    ├── seeded_clinics:   Three clinics in two cities
    ├── fake_sender:      Recording EmailSender (no network)
    ├── notifier:         NotificationService wired to fake_sender
    └── test_client:      HTTPX AsyncClient with db and notifier overridden
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RESEND_API_KEY"] = ""
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from vetlyst.database import Base
from vetlyst.exceptions import NotificationError
from vetlyst.models import Clinic
from vetlyst.services.email_base import EmailSender
from vetlyst.services.notification_service import NotificationService


class FakeSender(EmailSender):
    """
    In-memory EmailSender.

    Records every send in `sent`. With fail=True every send raises
    NotificationError, like a provider outage would.
    """

    def __init__(self, configured: bool = True, fail: bool = False, fail_for: Optional[str] = None):
        self.configured = configured
        self.fail = fail
        self.fail_for = fail_for
        self.sent: List[dict] = []
        self.attempts: List[str] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def send(self, from_address, to, subject, html, reply_to=None) -> str:
        self.attempts.append(to)
        if self.fail or to == self.fail_for:
            raise NotificationError(message="provider down", recipient=to)
        self.sent.append(
            {"from": from_address, "to": to, "subject": subject, "html": html, "reply_to": reply_to}
        )
        return f"msg-{len(self.sent)}"

    def status(self) -> str:
        return "available" if self.configured else "not_configured"


# ══════════════════════════════════════════════════════════════════════════
# Mocked Collaborators
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    AsyncSession stand-in for failure-path tests.

    Usage:
        mock_db_session.commit.side_effect = OperationalError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def fake_sender():
    return FakeSender()


@pytest.fixture
def notifier(fake_sender):
    return NotificationService(
        sender=fake_sender,
        appointments_from="Vetlyst <appointments@vetlyst.com>",
        claims_from="Vetlyst <noreply@vetlyst.com>",
        claims_admin_email="claims@vetlyst.com",
        support_email="support@vetlyst.com",
    )


# ══════════════════════════════════════════════════════════════════════════
# Real Database (in-memory SQLite)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    Fresh in-memory database per test.

    StaticPool keeps the single connection alive; without it every new
    connection would see an empty database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


def make_clinic(**overrides) -> Clinic:
    values = {
        "place_id": "ChIJN1t_tDeuEmsRUsoyG83frY4",
        "name": "Ace Vet Clinic",
        "clinic_type": "Veterinarian",
        "city": "Madison",
        "state": "WI",
        "rating": 4.5,
        "reviews": 120,
    }
    values.update(overrides)
    return Clinic(**values)


@pytest.fixture
def clinic_factory():
    """Build unsaved Clinic rows: `clinic_factory(place_id="X", name="Y")`."""
    return make_clinic


@pytest_asyncio.fixture
async def seeded_clinics(db_session):
    """
    Ace Vet (Madison, 4.5), Badger Animal Hospital (Madison, 4.9, featured),
    Lakeside Emergency Vet (Middleton, unrated).
    """
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    clinics = [
        make_clinic(
            place_id="ChIJN1t_tDeuEmsRUsoyG83frY4",
            name="Ace Vet",
            clinic_type="Veterinarian",
            city="Madison",
            rating=4.5,
            created_at=base,
        ),
        make_clinic(
            place_id="ChIJB4dgr0000000000000001",
            name="Badger Animal Hospital",
            clinic_type="Veterinarian, Animal hospital",
            city="Madison",
            rating=4.9,
            listing_tier="Featured",
            lead_email="frontdesk@badgeranimal.example",
            accepts_appointments=True,
            created_at=base + timedelta(minutes=1),
        ),
        make_clinic(
            place_id="ChIJLk5dEmerg00000000002",
            name="Lakeside Emergency Vet",
            clinic_type="Emergency veterinarian service",
            city="Middleton",
            rating=None,
            created_at=base + timedelta(minutes=2),
        ),
    ]
    db_session.add_all(clinics)
    await db_session.commit()
    return clinics


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory, notifier):
    """
    HTTPX AsyncClient routed straight into the app via ASGITransport.

    The app's database and notifier dependencies are swapped for the
    in-memory database and the recording sender. Lifespan does not run.
    """
    from vetlyst.database import get_db_session
    from vetlyst.main import app
    from vetlyst.services.notification_service import get_notification_service

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_notification_service] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
