import uuid
from sqlalchemy import Column, String, DateTime, UniqueConstraint, Uuid
from sqlalchemy.sql import func
from lody.core.database import Base

class WaitlistEntry(Base):
    __tablename__ = "waitlist_entries"
    id = Column(Uuid(), primary_key=True, default=uuid.uuid4)
    email = Column(String, nullable=False, unique=True, index=True)
    target_language = Column(String, nullable=True)
    source = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint('email', name='uq_waitlist_email'),
    )
