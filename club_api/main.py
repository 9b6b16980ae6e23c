"""FastAPI application entry point."""
import logging
import traceback
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select
from starlette.exceptions import HTTPException as StarletteHTTPException

from club_api.config import get_settings
from club_api.database import AsyncSessionLocal, init_models
from club_api.api.routes import auth, event, members, blog, team, contact, gallery
from club_api.api.utils.dependencies import get_blog_store
from club_api.models.user import User, UserRole
from club_api.services.exceptions import ClubError
from club_api.tasks import start_scheduler, stop_scheduler
from club_api.utils.security import hash_password
from club_api.api.utils.validation import normalize_email
from club_api.version import VERSION


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

settings = get_settings()
logging.getLogger().setLevel(settings.LOG_LEVEL.upper())

# Silence SQLAlchemy query logging (too verbose)
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
logging.getLogger('sqlalchemy.pool').setLevel(logging.WARNING)

# Silence passlib bcrypt version warning (known compatibility issue with bcrypt 4.x)
logging.getLogger('passlib.handlers.bcrypt').setLevel(logging.ERROR)

logger = logging.getLogger(__name__)

# Status codes without a more specific error code
_HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    429: "RATE_LIMITED",
}


async def bootstrap_admin(session_factory=AsyncSessionLocal) -> bool:
    """
    Create the configured admin account when no admin exists yet.

    Returns:
        True if an admin was created
    """
    async with session_factory() as session:
        result = await session.execute(
            select(User).where(User.role == UserRole.ADMIN.value).limit(1)
        )
        if result.scalar_one_or_none():
            logger.info("  Admin bootstrap: Skipped (admin users already exist)")
            return False

        session.add(User(
            email=settings.ADMIN_EMAIL,
            email_normalized=normalize_email(settings.ADMIN_EMAIL),
            first_name=settings.ADMIN_FIRST_NAME,
            last_name=settings.ADMIN_LAST_NAME,
            role=UserRole.ADMIN.value,
            is_active=True,
            password_hash=hash_password(settings.ADMIN_PASSWORD),
        ))
        await session.commit()
        logger.info("  Admin bootstrap: Created initial admin user %s", settings.ADMIN_EMAIL)
        return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("Club API %s starting...", VERSION)
    logger.info("  Environment: %s", settings.ENVIRONMENT.upper())
    logger.info("  Database: %s", settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured')
    logger.info("  Session expiry: %d hours", settings.SESSION_EXPIRY_HOURS)

    await init_models()
    await get_blog_store().ensure_ready()

    # Only runs if NO admin users exist (prevents accidental password resets)
    if settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD:
        try:
            await bootstrap_admin()
        except Exception as e:
            logger.error("  Admin bootstrap: Failed - %s", e)
    else:
        logger.info("  Admin bootstrap: Skipped (ADMIN_EMAIL not configured)")

    if settings.SCHEDULER_ENABLED:
        logger.info("  Background scheduler: Starting...")
        try:
            await start_scheduler()
            logger.info("  Background scheduler: Started successfully")
        except Exception as e:
            logger.error("  Background scheduler: Failed to start - %s", e)

    yield  # Application runs

    logger.info("Club API shutting down...")
    try:
        await stop_scheduler()
    except Exception as e:
        logger.error("  Background scheduler: Error during shutdown - %s", e)


app = FastAPI(
    title="Science Club API",
    description="API for club events and registrations, members, blog, team roster and contact form",
    version=VERSION,
    docs_url="/api/docs" if settings.DEBUG else None,  # Disable docs in production
    redoc_url="/api/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)


app.include_router(auth.router)
app.include_router(event.router)
app.include_router(members.router)
app.include_router(blog.router)
app.include_router(team.router)
app.include_router(contact.router)
app.include_router(gallery.router)


# ============== Health ==============

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api/health")
async def api_health_check():
    """Health check endpoint under the API prefix."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """API index."""
    return {
        "name": "Science Club API",
        "version": VERSION,
        "endpoints": {
            "auth": "/api/auth",
            "events": "/api/events",
            "members": "/api/members",
            "blog": "/api/blog",
            "team": "/api/team",
            "contact": "/api/contact",
            "gallery": "/api/gallery",
            "health": "/api/health",
        },
    }


# ============== Error Handlers ==============

@app.exception_handler(ClubError)
async def domain_error_handler(request: Request, exc: ClubError):
    """Render domain errors with their stable code."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors with a code alongside the detail."""
    code = getattr(exc, "code", None) or _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": code, "retriable": False},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Reject malformed input with 400 and the offending fields."""
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation failed",
            "code": "VALIDATION_ERROR",
            "retriable": False,
            "errors": errors,
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    if settings.DEBUG:
        return JSONResponse(
            status_code=500,
            content={
                "detail": str(exc),
                "code": "INTERNAL_ERROR",
                "retriable": False,
                "traceback": "".join(traceback.format_exception(exc)),
            }
        )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "code": "INTERNAL_ERROR", "retriable": False}
    )
