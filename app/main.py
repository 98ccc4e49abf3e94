# app/main.py
"""
FastAPI application entry point.
Includes security middleware, error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import bookings, vehicles, renters, upload_issues, health
from app.database import create_tables
from app.config import settings
from app.exceptions import IntakeError
from app.services.media_uploader import MediaUploader
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Vehicle Hire Intake API",
    description="Renter KYC registration, document upload and vehicle booking.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (the registration form is served from another origin) ──────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the form's origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth for operator endpoints.
    The public registration form (submit + available vehicles) never sends a key.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    OPEN_PATHS = {"/api/v1/submit", "/api/v1/vehicles/available", "/api/v1/health",
                  "/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.OPEN_PATHS or request.method == "OPTIONS" or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"success": False, "error": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(IntakeError)
async def intake_error_handler(request: Request, exc: IntakeError):
    logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message, "field": exc.field},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": first.get("msg", "Invalid request"),
                 "field": ".".join(loc) or None},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(bookings.router,      prefix="/api/v1", tags=["Registration"])
app.include_router(vehicles.router,      prefix="/api/v1", tags=["Vehicles"])
app.include_router(renters.router,       prefix="/api/v1", tags=["Renters"])
app.include_router(upload_issues.router, prefix="/api/v1", tags=["Upload issues"])
app.include_router(health.router,        prefix="/api/v1", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Vehicle hire intake starting up...")
    create_tables()
    logger.info("Database tables ready")
    # One uploader for the process lifetime, handed to routes via get_media_uploader
    app.state.media_uploader = MediaUploader.from_settings(settings)
    logger.info(f"Media host: {settings.IMAGEKIT_URL_ENDPOINT or '(not configured)'}")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Vehicle hire intake shutting down...")
