from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from lody.core.deps import get_client_id, get_registration_service
from lody.core.exceptions import RegistrationError
from lody.schemas.waitlist import LanguageOption, RegistrationRecord, StatusResponse, TargetLanguage, WaitlistIn
from lody.services.registration_service import RegistrationService
from lody.utils.audit import audit
from lody.utils.rate_limiter import allow_signup

router = APIRouter(prefix="/public", tags=["public"])

WAITLIST_OPEN = True

@router.get("/status", response_model=StatusResponse)
async def get_status(registration: RegistrationService = Depends(get_registration_service)):
    return StatusResponse(waitlist_open=WAITLIST_OPEN, registration_backend=registration.name)

@router.get("/languages", response_model=List[LanguageOption])
async def list_languages():
    return [LanguageOption(value=language, label=language.label) for language in TargetLanguage]

@router.post("/waitlist", response_model=RegistrationRecord, status_code=201)
async def add_to_waitlist(
    payload: WaitlistIn,
    request: Request,
    registration: RegistrationService = Depends(get_registration_service),
):
    """Add an email to the waitlist. Joining twice returns the existing entry."""
    if not allow_signup(get_client_id(request)):
        audit("WAITLIST_RATE_LIMITED", email=payload.email)
        raise HTTPException(status_code=429, detail="Too many signups, slow down.")
    language = payload.target_language.value if payload.target_language else None
    try:
        return await registration.register(payload.email, language, source=payload.source or "api")
    except RegistrationError:
        raise HTTPException(
            status_code=503,
            detail="Something went wrong. Please try again or contact us if the problem persists.",
        )
