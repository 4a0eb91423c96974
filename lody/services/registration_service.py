import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from lody.core.config import settings
from lody.core.database import SessionLocal
from lody.core.exceptions import RegistrationError
from lody.models.waitlist_entry import WaitlistEntry
from lody.schemas.waitlist import RegistrationRecord, TargetLanguage
from lody.utils.audit import audit

logger = logging.getLogger(__name__)


class RegistrationService:
    """System of record for waitlist entries.

    ``register`` either returns a RegistrationRecord or raises RegistrationError;
    callers never need to know why a registration failed.
    """

    name = "base"

    async def register(
        self,
        email: str,
        target_language: Optional[str] = None,
        source: Optional[str] = None,
    ) -> RegistrationRecord:
        raise NotImplementedError


def normalize_email(email: str) -> str:
    try:
        result = validate_email((email or "").strip(), check_deliverability=False)
    except EmailNotValidError as e:
        audit("WAITLIST_REJECTED", reason="invalid_email")
        raise RegistrationError("Invalid email address", details=str(e)) from e
    return result.normalized.lower()


def normalize_language(target_language: Optional[str]) -> Optional[TargetLanguage]:
    try:
        return TargetLanguage.parse(target_language)
    except ValueError as e:
        audit("WAITLIST_REJECTED", reason="unknown_language", target_language=target_language)
        raise RegistrationError("Unsupported target language", details=str(target_language)) from e


class DatabaseRegistrationService(RegistrationService):
    """Stores entries in the waitlist_entries table.

    Signing up twice with the same address is not an error: the existing
    entry comes back with ``already_registered`` set.
    """

    name = "database"

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        default_source: str = "landing-page",
        send_confirmation: Optional[bool] = None,
    ):
        self.session_factory = session_factory
        self.default_source = default_source
        if send_confirmation is None:
            send_confirmation = settings.WAITLIST_CONFIRMATION_EMAILS
        self.send_confirmation = send_confirmation

    async def register(
        self,
        email: str,
        target_language: Optional[str] = None,
        source: Optional[str] = None,
    ) -> RegistrationRecord:
        record = await run_in_threadpool(self._register, email, target_language, source)
        if not record.already_registered and self.send_confirmation:
            self._queue_confirmation(record)
        return record

    def _register(self, email: str, target_language: Optional[str], source: Optional[str]) -> RegistrationRecord:
        normalized = normalize_email(email)
        language = normalize_language(target_language)

        db = self.session_factory()
        try:
            existing = self._find(db, normalized)
            if existing is not None:
                audit("WAITLIST_DUPLICATE", email=normalized)
                return _to_record(existing, already_registered=True)

            entry = WaitlistEntry(
                email=normalized,
                target_language=language.value if language else None,
                source=source or self.default_source,
            )
            db.add(entry)
            try:
                db.commit()
            except IntegrityError:
                # Lost a race against a concurrent signup for the same address
                db.rollback()
                existing = self._find(db, normalized)
                if existing is None:
                    raise
                audit("WAITLIST_DUPLICATE", email=normalized)
                return _to_record(existing, already_registered=True)
            db.refresh(entry)
            audit("WAITLIST_JOINED", email=normalized, target_language=entry.target_language, source=entry.source)
            return _to_record(entry, already_registered=False)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to store waitlist entry: {e}")
            raise RegistrationError("Could not save waitlist entry", details=str(e)) from e
        finally:
            db.close()

    @staticmethod
    def _find(db: Session, email: str) -> Optional[WaitlistEntry]:
        return db.query(WaitlistEntry).filter(WaitlistEntry.email == email).first()

    def _queue_confirmation(self, record: RegistrationRecord) -> None:
        from lody.tasks.notification_tasks import send_waitlist_confirmation

        language = record.target_language.value if record.target_language else None
        try:
            send_waitlist_confirmation.delay(record.email, language)
        except Exception as e:
            # The signup is stored; a broker outage only costs the email
            logger.warning(f"Could not queue waitlist confirmation: {e}")


class StubRegistrationService(RegistrationService):
    """Simulated backend: waits, then succeeds without storing anything."""

    name = "stub"

    def __init__(self, delay_seconds: float = 1.5):
        self.delay_seconds = delay_seconds

    async def register(
        self,
        email: str,
        target_language: Optional[str] = None,
        source: Optional[str] = None,
    ) -> RegistrationRecord:
        logger.info("Submitting waitlist form to stub backend")
        language = normalize_language(target_language)
        await asyncio.sleep(self.delay_seconds)
        return RegistrationRecord(
            id=uuid.uuid4(),
            email=(email or "").strip().lower(),
            target_language=language,
            created_at=datetime.now(timezone.utc),
        )


def _to_record(entry: WaitlistEntry, already_registered: bool) -> RegistrationRecord:
    return RegistrationRecord(
        id=entry.id,
        email=entry.email,
        target_language=TargetLanguage(entry.target_language) if entry.target_language else None,
        created_at=entry.created_at,
        already_registered=already_registered,
    )


def build_registration_service() -> RegistrationService:
    backend = settings.REGISTRATION_BACKEND.strip().lower()
    if backend == "stub":
        return StubRegistrationService(delay_seconds=settings.STUB_REGISTRATION_DELAY_SECONDS)
    if backend == "database":
        return DatabaseRegistrationService()
    raise ValueError(f"Unknown REGISTRATION_BACKEND: {settings.REGISTRATION_BACKEND}")
