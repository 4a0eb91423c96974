import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REGISTRATION_BACKEND", "database")
os.environ.setdefault("WAITLIST_RATE_LIMIT_PER_MINUTE", "0")
os.environ.setdefault("WAITLIST_CONFIRMATION_EMAILS", "false")
os.environ.setdefault("RESEND_API_KEY", "")

import asyncio
from typing import List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lody.core.database import Base
from lody.core.deps import get_registration_service, get_submission_registry
from lody.core.exceptions import RegistrationError
from lody.main import app
from lody.schemas.waitlist import RegistrationRecord, TargetLanguage
from lody.services.registration_service import DatabaseRegistrationService, RegistrationService
from lody.services.submission_controller import SubmissionController, SubmissionRegistry
import lody.models  # noqa: F401


class FakeRegistration(RegistrationService):
    """Records calls; fails with ``error`` when set, waits on ``gate`` when set."""

    name = "fake"

    def __init__(self, error: Optional[Exception] = None, gate: Optional[asyncio.Event] = None):
        self.error = error
        self.gate = gate
        self.started = asyncio.Event()
        self.calls: List[tuple] = []

    async def register(self, email, target_language=None, source=None):
        self.calls.append((email, target_language))
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return RegistrationRecord(
            id="00000000-0000-0000-0000-000000000001",
            email=email,
            target_language=TargetLanguage.parse(target_language),
        )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def registration_service(session_factory):
    return DatabaseRegistrationService(session_factory=session_factory, send_confirmation=False)


@pytest.fixture
def failing_registration():
    return FakeRegistration(error=RegistrationError("backend unavailable"))


def use_registration(service: RegistrationService) -> SubmissionRegistry:
    """Point the app at ``service`` for both the pages and the JSON API."""
    registry = SubmissionRegistry(factory=lambda: SubmissionController(service))
    app.dependency_overrides[get_registration_service] = lambda: service
    app.dependency_overrides[get_submission_registry] = lambda: registry
    return registry


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


def make_client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
