from fastapi import Request

from lody.services.registration_service import RegistrationService
from lody.services.submission_controller import SubmissionRegistry


def get_registration_service(request: Request) -> RegistrationService:
    return request.app.state.registration_service


def get_submission_registry(request: Request) -> SubmissionRegistry:
    return request.app.state.submissions


def get_client_id(request: Request) -> str:
    """Best-effort client identity for rate limiting."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "anonymous"
