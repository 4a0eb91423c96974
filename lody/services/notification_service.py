import enum
import logging
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)


class Severity(str, enum.Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    severity: Severity = Severity.INFO


MISSING_EMAIL = Notification(
    title="Email required",
    description="Please enter your email address to join the waitlist.",
    severity=Severity.WARNING,
)
WELCOME = Notification(
    title="Welcome to Lody! 🎶",
    description="You're on the waitlist! Check your email for confirmation.",
    severity=Severity.INFO,
)
SUBMISSION_FAILED = Notification(
    title="Something went wrong",
    description="Please try again or contact us if the problem persists.",
    severity=Severity.ERROR,
)


class NotificationEmitter:
    """Shows transient, non-blocking messages to the visitor."""

    def notify(self, title: str, description: str, severity: Severity = Severity.INFO) -> None:
        raise NotImplementedError

    def emit(self, notification: Notification) -> None:
        self.notify(notification.title, notification.description, notification.severity)


class NotificationQueue(NotificationEmitter):
    """Holds notifications until the next page render drains them as toasts."""

    def __init__(self):
        self._pending: List[Notification] = []

    def notify(self, title: str, description: str, severity: Severity = Severity.INFO) -> None:
        notification = Notification(title=title, description=description, severity=Severity(severity))
        logger.debug(f"Notification [{notification.severity.value}] {notification.title}")
        self._pending.append(notification)

    def drain(self) -> List[Notification]:
        drained, self._pending = self._pending, []
        return drained
