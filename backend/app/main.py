"""
CareerBridge API application.

Wires the auth, profile, help, jobs, applications and admin routers onto one
FastAPI app and turns domain errors into HTTP responses: validation 422,
bad credentials 401, soft denials 303, missing records 404, conflicts 409
and store failures 503/504.

Run with: uvicorn app.main:app --reload
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from app import database
from app.config import settings
from app.errors import (
    AuthError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StoreError,
    StoreTimeout,
    ValidationError,
)
from app.api import admin, applications, auth, help, jobs, profile

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup when configured (dev / SQLite); dispose the engine on shutdown."""
    # Startup
    logger.info("Starting CareerBridge API...")
    logger.info(f"Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else settings.database_url}")
    logger.info(f"Debug mode: {settings.debug}")

    if settings.create_tables_on_startup:
        async with database.engine.begin() as conn:
            await conn.run_sync(database.Base.metadata.create_all)

    yield

    # Shutdown
    logger.info("Shutting down CareerBridge API...")
    await database.engine.dispose()


app = FastAPI(
    title="CareerBridge API",
    description="Job board connecting students, employers and administrators",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS
# Set ALLOWED_ORIGINS environment variable with comma-separated domains
allowed_origins = [
    "http://localhost:3000",  # Local development
    "http://localhost:5173",
]

if settings.allowed_origins:
    allowed_origins.extend(origin.strip() for origin in settings.allowed_origins.split(',') if origin.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Domain error handlers
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "fields": exc.fields})


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request: Request, exc: AuthorizationError):
    # Soft deny: only the redirect target is exposed
    return RedirectResponse(url=exc.redirect_to, status_code=303)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    status_code = 504 if isinstance(exc, StoreTimeout) else 503
    return JSONResponse(
        status_code=status_code,
        content={"detail": "Something went wrong. Please try again."},
    )


@app.get("/health")
async def health_check():
    """Liveness probe."""
    return {
        "status": "healthy",
        "service": "CareerBridge API",
        "version": "1.0.0",
    }


@app.get("/")
async def root():
    """Service info. Also where soft denials land."""
    return {
        "message": "CareerBridge API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


# Register API routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(profile.router, prefix="/api", tags=["profile"])
app.include_router(help.router, prefix="/api/help", tags=["help"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
