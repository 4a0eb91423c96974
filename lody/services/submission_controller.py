import asyncio
import enum
import logging
from collections import OrderedDict
from typing import Callable, Optional

from lody.core.exceptions import MissingEmailError
from lody.services.notification_service import (
    MISSING_EMAIL,
    SUBMISSION_FAILED,
    WELCOME,
    NotificationEmitter,
    NotificationQueue,
)
from lody.services.registration_service import RegistrationService
from lody.services.waitlist_form import FormState, validate_submission

logger = logging.getLogger(__name__)


class SubmissionState(str, enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"


class View(str, enum.Enum):
    FORM = "form"
    TERMINAL = "terminal"


class SubmissionController:
    """Drives one visitor's waitlist signup.

    IDLE -> SUBMITTING -> SUCCEEDED on a successful registration, or back to
    IDLE when the Registration Service fails. Submits that arrive while a
    registration is in flight are ignored.
    """

    def __init__(
        self,
        registration: RegistrationService,
        notifier: Optional[NotificationEmitter] = None,
        form: Optional[FormState] = None,
        timeout: Optional[float] = None,
        source: str = "landing-page",
    ):
        self.registration = registration
        self.notifier = notifier if notifier is not None else NotificationQueue()
        self.form = form if form is not None else FormState()
        self.timeout = timeout
        self.source = source
        self.is_success = False
        self.last_error: Optional[Exception] = None
        # Set when a submit arrived while the registration was in flight
        self.resubmitted = False

    @property
    def is_submitting(self) -> bool:
        return self.form.is_submitting

    @property
    def state(self) -> SubmissionState:
        if self.form.is_submitting:
            return SubmissionState.SUBMITTING
        if self.is_success:
            return SubmissionState.SUCCEEDED
        return SubmissionState.IDLE

    async def submit(self) -> SubmissionState:
        if self.form.is_submitting:
            logger.debug("Ignoring submit while a registration is in flight")
            self.resubmitted = True
            return self.state

        submission = self.form.to_submission()
        try:
            validate_submission(submission)
        except MissingEmailError:
            self.notifier.emit(MISSING_EMAIL)
            return self.state

        self.form.is_submitting = True
        self.resubmitted = False
        try:
            call = self.registration.register(
                submission.email,
                submission.target_language,
                source=self.source,
            )
            if self.timeout is not None:
                await asyncio.wait_for(call, timeout=self.timeout)
            else:
                await call
        except Exception as e:
            logger.warning(f"Waitlist submission failed: {e!r}")
            self.last_error = e
            self.notifier.emit(SUBMISSION_FAILED)
        else:
            self.last_error = None
            self.is_success = True
            self.notifier.emit(WELCOME)
        finally:
            self.form.is_submitting = False
        return self.state

    def return_to_form(self) -> None:
        """Leave the thank-you view. Form values are kept as the visitor left them."""
        self.is_success = False


def select_view(controller: SubmissionController) -> View:
    if controller.state is SubmissionState.SUCCEEDED:
        return View.TERMINAL
    return View.FORM


class SubmissionRegistry:
    """One SubmissionController per visitor session, least recently used evicted first."""

    def __init__(self, factory: Callable[[], SubmissionController], max_sessions: int = 10000):
        self.factory = factory
        self.max_sessions = max_sessions
        self._controllers: "OrderedDict[str, SubmissionController]" = OrderedDict()

    def get(self, session_id: str) -> SubmissionController:
        controller = self._controllers.get(session_id)
        if controller is None:
            controller = self.factory()
            self._controllers[session_id] = controller
            self._evict(keep=session_id)
        else:
            self._controllers.move_to_end(session_id)
        return controller

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)

    def _evict(self, keep: str) -> None:
        """Drop idle sessions, oldest first. In-flight sessions and ``keep`` stay even over capacity."""
        excess = len(self._controllers) - self.max_sessions
        if excess <= 0:
            return
        idle = [
            session_id
            for session_id, controller in self._controllers.items()
            if session_id != keep and not controller.is_submitting
        ]
        for session_id in idle[:excess]:
            del self._controllers[session_id]
