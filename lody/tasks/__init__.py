# Tasks package
from .notification_tasks import send_waitlist_confirmation

__all__ = [
    "send_waitlist_confirmation",
]
