import uuid
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from lody.core.config import settings
from lody.core.deps import get_client_id, get_submission_registry
from lody.schemas.waitlist import TargetLanguage
from lody.services.notification_service import SUBMISSION_FAILED
from lody.services.submission_controller import SubmissionController, SubmissionRegistry, View, select_view
from lody.utils.audit import audit
from lody.utils.rate_limiter import allow_signup

router = APIRouter(tags=["pages"], include_in_schema=False)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

# Referral codes are not generated yet
REFERRAL_PLACEHOLDER = "lody.app/waitlist?ref=your-code"

VIEW_TEMPLATES = {
    View.FORM: "index.html",
    View.TERMINAL: "success.html",
}


def _session_id(request: Request) -> str:
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or uuid.uuid4().hex


def _render(request: Request, controller: SubmissionController, session_id: str, drain: bool = True) -> HTMLResponse:
    view = select_view(controller)
    response = templates.TemplateResponse(
        request,
        VIEW_TEMPLATES[view],
        {
            "view": view.value,
            "form": controller.form,
            "is_submitting": controller.is_submitting,
            "languages": list(TargetLanguage),
            "notifications": controller.notifier.drain() if drain else [],
            "referral_link": REFERRAL_PLACEHOLDER,
        },
    )
    response.set_cookie(settings.SESSION_COOKIE_NAME, session_id, httponly=True, samesite="lax")
    return response


@router.get("/", response_class=HTMLResponse)
async def landing(request: Request, registry: SubmissionRegistry = Depends(get_submission_registry)):
    """Landing page: the waitlist form, or the thank-you view after a signup."""
    session_id = _session_id(request)
    return _render(request, registry.get(session_id), session_id)


@router.post("/waitlist", response_class=HTMLResponse)
async def submit_waitlist(
    request: Request,
    email: str = Form(""),
    target_language: str = Form(""),
    registry: SubmissionRegistry = Depends(get_submission_registry),
):
    session_id = _session_id(request)
    controller = registry.get(session_id)

    # The form is disabled while a registration is in flight
    owns_submission = not controller.is_submitting
    if owns_submission:
        controller.form.set_email(email)
        controller.form.set_target_language(target_language)

        if email.strip() and not allow_signup(get_client_id(request)):
            audit("WAITLIST_RATE_LIMITED", email=email)
            controller.notifier.emit(SUBMISSION_FAILED)
            return _render(request, controller, session_id)

    await controller.submit()
    # A re-submit replaced this response in the browser; leave the outcome
    # queued for the page it will load next
    drain = owns_submission and not controller.resubmitted
    return _render(request, controller, session_id, drain=drain)


@router.post("/waitlist/back")
async def back_to_home(request: Request, registry: SubmissionRegistry = Depends(get_submission_registry)):
    session_id = _session_id(request)
    registry.get(session_id).return_to_form()
    response = RedirectResponse(url="/", status_code=303)
    response.set_cookie(settings.SESSION_COOKIE_NAME, session_id, httponly=True, samesite="lax")
    return response
