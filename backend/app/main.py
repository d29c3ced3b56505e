import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from app.config import settings
from app.middleware.exceptions import register_exception_handlers
from app.middleware.security import SecurityHeadersMiddleware, UploadsCacheMiddleware
from app.routers import (
    auth,
    batches,
    categories,
    growth_logs,
    harvest_records,
    health,
    landing,
    management,
    public,
    summaries,
    templates,
    uploads,
)
from app.services.uploads import ensure_upload_dirs, uploads_root

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the upload folders before serving."""
    ensure_upload_dirs()
    logger.info(f"Serving uploads from {uploads_root().resolve()}")
    yield


app = FastAPI(
    title="Tea Garden CMS",
    description="Tea garden traceability and landing-page content management API",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
# Security headers (applies to all responses)
app.add_middleware(SecurityHeadersMiddleware)

# Immutable caching for uploaded media
app.add_middleware(UploadsCacheMiddleware)

# Signed-cookie sessions (24 h)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    max_age=settings.session_max_age,
    same_site="lax",
    https_only=settings.environment == "production",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
# No login required
app.include_router(health.router)
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(public.router, prefix="/api/public", tags=["public"])

# Login required
app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
app.include_router(harvest_records.router, prefix="/api/harvest-records", tags=["harvest-records"])
app.include_router(batches.router, prefix="/api/batches", tags=["batches"])
app.include_router(growth_logs.router, prefix="/api/growth-logs", tags=["growth-logs"])
app.include_router(summaries.router, prefix="/api", tags=["summaries"])
app.include_router(landing.router, prefix="/api", tags=["landing"])
app.include_router(management.router, prefix="/api", tags=["management"])
app.include_router(templates.router, prefix="/api", tags=["templates"])
app.include_router(uploads.router, prefix="/api", tags=["uploads"])

# ── Static uploads ───────────────────────────────────────────
app.mount("/uploads", StaticFiles(directory=settings.uploads_dir, check_dir=False), name="uploads")
