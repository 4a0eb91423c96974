from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime
import enum
import uuid


class TargetLanguage(str, enum.Enum):
    SPANISH = "spanish"
    FRENCH = "french"
    ITALIAN = "italian"
    PORTUGUESE = "portuguese"
    GERMAN = "german"
    JAPANESE = "japanese"
    KOREAN = "korean"
    CHINESE = "chinese"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["TargetLanguage"]:
        """Return the member for value, None when unset. Raises ValueError for unknown codes."""
        if value is None:
            return None
        candidate = value.strip().lower()
        if not candidate:
            return None
        return cls(candidate)


class LanguageOption(BaseModel):
    value: TargetLanguage
    label: str


class WaitlistIn(BaseModel):
    email: EmailStr
    target_language: Optional[TargetLanguage] = None
    source: Optional[str] = None


class RegistrationRecord(BaseModel):
    id: uuid.UUID
    email: str
    target_language: Optional[TargetLanguage] = None
    created_at: Optional[datetime] = None
    already_registered: bool = False


class StatusResponse(BaseModel):
    waitlist_open: bool
    registration_backend: str
