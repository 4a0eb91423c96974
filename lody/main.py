import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from lody.api.v1.api import api_router
from lody.core.config import settings
from lody.core.database import Base, engine
from lody.services.registration_service import build_registration_service
from lody.services.submission_controller import SubmissionController, SubmissionRegistry
from lody.web import pages
import lody.models  # noqa: F401  registers tables on Base

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

# Configure audit logger (JSON lines)
audit_logger = logging.getLogger("audit")
if not audit_logger.handlers:
    handler = logging.StreamHandler()
    # Keep raw JSON line without extra prefixes
    handler.setFormatter(logging.Formatter("%(message)s"))
    audit_logger.addHandler(handler)
audit_logger.setLevel(logging.INFO)
# Do not propagate to root to avoid duplication
audit_logger.propagate = False

api_description = """
## Lody Waitlist

Landing page and waitlist signup for Lody, language learning through music.

- `GET /` - landing page with the waitlist form
- `POST /api/v1/public/waitlist` - join the waitlist (JSON)
- `GET /api/v1/public/languages` - target languages offered in the form
"""

app = FastAPI(
    title="Lody Waitlist",
    description=api_description,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(GZipMiddleware, minimum_size=500)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.registration_service = build_registration_service()
app.state.submissions = SubmissionRegistry(
    factory=lambda: SubmissionController(
        app.state.registration_service,
        timeout=settings.REGISTRATION_TIMEOUT_SECONDS,
    ),
    max_sessions=settings.WAITLIST_MAX_SESSIONS,
)

app.include_router(pages.router)
app.include_router(api_router, prefix="/api/v1")

@app.on_event("startup")
def create_tables():
    if app.state.registration_service.name != "database":
        return
    Base.metadata.create_all(bind=engine)
    logger.info("Waitlist tables ready")

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
