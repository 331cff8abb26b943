import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import all models so every table is registered on Base before create_all
from . import (
    models,  # noqa: F401
    models_google_calendar,  # noqa: F401
)
from .config import ALLOWED_ORIGINS, RATE_LIMIT_ENABLED
from .database import Base, engine
from .domain.appointments.router import router as appointments_router
from .domain.chat.router import router as chat_router
from .domain.notifications.router import router as notifications_router
from .domain.payments.router import router as payments_router
from .domain.professionals.router import router as professionals_router
from .domain.profiles.router import router as profiles_router
from .domain.scheduling.router import router as scheduling_router
from .domain.stats.router import router as stats_router
from .routes.google_calendar import events_router as calendar_events_router
from .routes.google_calendar import router as google_calendar_router
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Several workers may race on the first create_all
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")

    if RATE_LIMIT_ENABLED:
        try:
            from .rate_limiter import get_redis_client

            get_redis_client().ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.warning(
                f"Redis connection failed - Rate limiting will operate in fail-open mode: {e}"
            )

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="CitaPro API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors from HTTPBearer to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list:
    # ValueError instances raised in field validators end up in ctx and are not JSON serializable
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        errors.append(error)
    return errors


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise
    elapsed_ms = (time.time() - start) * 1000
    if response.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {response.status_code} ({elapsed_ms:.0f}ms)")
    return response


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(profiles_router)
app.include_router(professionals_router)
app.include_router(scheduling_router)
app.include_router(stats_router)
app.include_router(payments_router)
app.include_router(appointments_router)
app.include_router(notifications_router)
app.include_router(chat_router)
app.include_router(calendar_events_router)
app.include_router(google_calendar_router)


@app.get("/")
def root():
    return {"message": "CitaPro API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/health/redis")
async def redis_health_check():
    """Check Redis connectivity for monitoring"""
    try:
        from .rate_limiter import get_redis_client

        start_time = time.time()
        get_redis_client().ping()
        response_time = (time.time() - start_time) * 1000

        return {"status": "healthy", "redis": {"connected": True, "response_time_ms": round(response_time, 2)}}
    except Exception as e:
        return {"status": "unhealthy", "redis": {"connected": False, "error": str(e)}}
