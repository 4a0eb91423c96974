import logging
from typing import Optional
import resend
from lody.core.config import settings
from lody.schemas.waitlist import TargetLanguage

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self):
        resend.api_key = settings.RESEND_API_KEY
        self.sender = settings.EMAIL_FROM

    @property
    def configured(self) -> bool:
        return bool(settings.RESEND_API_KEY)

    def send_waitlist_confirmation(self, to: str, target_language: Optional[str] = None) -> bool:
        subject = "You're on the Lody waitlist 🎶"
        language_line = ""
        try:
            language = TargetLanguage.parse(target_language)
        except ValueError:
            language = None
        if language and language is not TargetLanguage.OTHER:
            language_line = f"<p>We'll have plenty of {language.label} songs ready for you.</p>"
        html = f"""
        <div style='font-family: "Josefin Sans", Arial, sans-serif; line-height:1.6;'>
            <h2>You're in! 🎶</h2>
            <p>Welcome to the Lody family! We'll send you updates as we get closer to launch.</p>
            {language_line}
            <p>No spam, just music and language learning magic.</p>
        </div>
        """
        try:
            resend.Emails.send({
                "from": self.sender,
                "to": [to],
                "subject": subject,
                "html": html,
            })
            return True
        except Exception as e:
            logger.error(f"Waitlist confirmation email failed: {e}")
            return False
