import logging
from typing import Optional

from lody.core.celery_app import celery_app
from lody.services.email_service import EmailService
from lody.utils.audit import audit

logger = logging.getLogger(__name__)

@celery_app.task
def send_waitlist_confirmation(email: str, target_language: Optional[str] = None):
    """Send the "you're on the waitlist" email using Resend"""
    service = EmailService()
    if not service.configured:
        logger.info("Resend API key not configured, skipping waitlist confirmation")
        return {"status": "skipped", "email": email}

    logger.info("📧 Sending waitlist confirmation")
    sent = service.send_waitlist_confirmation(email, target_language)
    audit("WAITLIST_CONFIRMATION_SENT", email=email, sent=sent)
    return {
        "status": "sent" if sent else "failed",
        "email": email,
    }
