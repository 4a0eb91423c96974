from dataclasses import dataclass
from typing import Optional

from lody.core.exceptions import MissingEmailError


@dataclass(frozen=True)
class WaitlistSubmission:
    email: str
    target_language: Optional[str] = None


class FormState:
    """Latest values the visitor typed into the waitlist form."""

    def __init__(self, email: str = "", target_language: Optional[str] = None):
        self.email = email
        self.target_language = target_language
        self.is_submitting = False

    def set_email(self, value: Optional[str]) -> None:
        self.email = value or ""

    def set_target_language(self, value: Optional[str]) -> None:
        self.target_language = value or None

    def to_submission(self) -> WaitlistSubmission:
        return WaitlistSubmission(email=self.email, target_language=self.target_language)


def validate_submission(submission: WaitlistSubmission) -> None:
    """Only presence is checked here; the Registration Service owns format rules."""
    if not submission.email or not submission.email.strip():
        raise MissingEmailError()
