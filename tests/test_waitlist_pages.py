import asyncio

import pytest

from conftest import FakeRegistration, make_client, use_registration
from lody.core.config import settings
from lody.models.waitlist_entry import WaitlistEntry
from lody.utils import rate_limiter
from lody.web import pages


@pytest.mark.asyncio
async def test_landing_renders_form_and_sets_session(registration_service):
    use_registration(registration_service)
    async with make_client() as ac:
        r = await ac.get("/")
    assert r.status_code == 200
    assert 'data-view="form"' in r.text
    assert "Join the Waitlist" in r.text
    assert 'value="spanish"' in r.text
    assert settings.SESSION_COOKIE_NAME in r.cookies


@pytest.mark.asyncio
async def test_empty_email_warns_without_registering():
    service = FakeRegistration()
    use_registration(service)
    async with make_client() as ac:
        r = await ac.post("/waitlist", data={"email": "", "target_language": ""})
    assert r.status_code == 200
    assert 'data-view="form"' in r.text
    assert "Email required" in r.text
    assert 'data-severity="warning"' in r.text
    assert service.calls == []


@pytest.mark.asyncio
async def test_successful_signup_shows_thank_you_view(registration_service, db_session):
    use_registration(registration_service)
    async with make_client() as ac:
        r = await ac.post("/waitlist", data={"email": "user@example.com", "target_language": "spanish"})
    assert r.status_code == 200
    assert 'data-view="terminal"' in r.text
    assert "You're in!" in r.text
    assert "Welcome to Lody" in r.text
    assert "lody.app/waitlist?ref=your-code" in r.text
    entry = db_session.query(WaitlistEntry).one()
    assert entry.email == "user@example.com"
    assert entry.target_language == "spanish"


@pytest.mark.asyncio
async def test_failed_signup_keeps_form_values(failing_registration):
    use_registration(failing_registration)
    async with make_client() as ac:
        r = await ac.post("/waitlist", data={"email": "user@example.com"})
    assert r.status_code == 200
    assert 'data-view="form"' in r.text
    assert "Something went wrong" in r.text
    assert 'value="user@example.com"' in r.text
    assert failing_registration.calls == [("user@example.com", None)]


@pytest.mark.asyncio
async def test_notifications_are_shown_once():
    use_registration(FakeRegistration())
    async with make_client() as ac:
        await ac.post("/waitlist", data={"email": ""})
        r = await ac.get("/")
    assert "Email required" not in r.text


@pytest.mark.asyncio
async def test_thank_you_view_survives_reload_until_back_to_home():
    service = FakeRegistration()
    use_registration(service)
    async with make_client() as ac:
        await ac.post("/waitlist", data={"email": "user@example.com", "target_language": "german"})

        r = await ac.get("/")
        assert 'data-view="terminal"' in r.text

        r = await ac.post("/waitlist/back")
        assert r.status_code == 303
        assert r.headers["location"] == "/"

        r = await ac.get("/")
    assert 'data-view="form"' in r.text
    assert 'value="user@example.com"' in r.text
    assert len(service.calls) == 1


@pytest.mark.asyncio
async def test_sessions_do_not_share_state():
    use_registration(FakeRegistration())
    async with make_client() as first:
        await first.post("/waitlist", data={"email": "user@example.com"})
    async with make_client() as second:
        r = await second.get("/")
    assert 'data-view="form"' in r.text
    assert "user@example.com" not in r.text


@pytest.mark.asyncio
async def test_rate_limited_signup_shows_error(monkeypatch):
    service = FakeRegistration()
    use_registration(service)
    monkeypatch.setattr(pages, "allow_signup", lambda client_id: False)
    async with make_client() as ac:
        r = await ac.post("/waitlist", data={"email": "user@example.com"})
    assert "Something went wrong" in r.text
    assert service.calls == []


@pytest.mark.asyncio
async def test_signup_proceeds_when_rate_limiter_redis_is_unreachable(monkeypatch, failing_registration):
    use_registration(failing_registration)
    monkeypatch.setattr(settings, "WAITLIST_RATE_LIMIT_PER_MINUTE", 5)
    monkeypatch.setattr(settings, "REDIS_URL", "redis://127.0.0.1:1/0")
    monkeypatch.setattr(rate_limiter, "_client", None)
    monkeypatch.setattr(rate_limiter, "_pool", None)
    async with make_client() as ac:
        r = await ac.post("/waitlist", data={"email": "user@example.com"})
    assert r.status_code == 200
    assert 'data-view="form"' in r.text
    assert "Something went wrong" in r.text
    assert failing_registration.calls == [("user@example.com", None)]


@pytest.mark.asyncio
async def test_outcome_toast_survives_resubmit_while_in_flight():
    gate = asyncio.Event()
    service = FakeRegistration(gate=gate)
    use_registration(service)
    async with make_client() as ac:
        await ac.get("/")
        first = asyncio.create_task(ac.post("/waitlist", data={"email": "user@example.com"}))
        await service.started.wait()

        r = await ac.post("/waitlist", data={"email": "user@example.com"})
        assert 'data-view="form"' in r.text
        assert "Joining..." in r.text
        assert 'http-equiv="refresh"' in r.text

        gate.set()
        superseded = await first
        assert "Welcome to Lody" not in superseded.text

        r = await ac.get("/")
    assert 'data-view="terminal"' in r.text
    assert "Welcome to Lody" in r.text
    assert len(service.calls) == 1


@pytest.mark.asyncio
async def test_single_submit_shows_outcome_in_its_own_response():
    use_registration(FakeRegistration())
    async with make_client() as ac:
        r = await ac.post("/waitlist", data={"email": "user@example.com"})
        assert "Welcome to Lody" in r.text
        r = await ac.get("/")
    assert "Welcome to Lody" not in r.text


@pytest.mark.asyncio
async def test_health_check():
    async with make_client() as ac:
        r = await ac.get("/health")
    assert r.json() == {"status": "healthy"}
