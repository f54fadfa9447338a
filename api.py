"""
User Auth FastAPI Application

Main entry point for the user authentication API.
Uses the generic common/ library for infrastructure and userauth/ for
business logic.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

# Common library imports
from common.database import MongoDB
from common.utils import APIException, error_response

# App-specific imports
from userauth.config import settings
from userauth.auth.dependencies import init_auth_services, get_user_store
from userauth.auth.errors import ValidationError
from userauth.auth.router import router as auth_router
from userauth.media.dependencies import init_media_services
from userauth.media.router import router as media_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# =============================================================================
# Database Instance
# =============================================================================
main_db = MongoDB()


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Refuses to start without a signing secret. A database that is down at
    startup is not fatal: requests get 503 until it becomes reachable.
    """
    logger.info("Starting User Auth API...")

    settings.validate_required()

    await main_db.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
        timeout_ms=settings.MONGODB_TIMEOUT_MS,
    )

    init_auth_services(main_db, settings)
    init_media_services(
        upload_dir=settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
        max_bytes=settings.UPLOAD_MAX_BYTES,
    )

    if main_db.is_connected:
        try:
            await get_user_store().ensure_indexes()
        except PyMongoError as e:
            logger.error(f"Could not ensure user indexes: {e}")

    logger.info("User Auth API started successfully!")

    yield

    logger.info("Shutting down User Auth API...")
    await main_db.disconnect()
    logger.info("User Auth API shut down complete.")


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="User Auth API",
    description="User registration, login and bearer-token authentication",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

# =============================================================================
# CORS Middleware
# =============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Render APIExceptions as standard error bodies."""
    errors = exc.errors if isinstance(exc, ValidationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.message, code=exc.code, details=exc.details, errors=errors),
        headers=exc.headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Framework-raised HTTP errors (unknown route, wrong method)."""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(message),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors, reported as 400."""
    errors = [str(error.get("msg")) for error in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response("Validation failed", code="VALIDATION_ERROR", errors=errors),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log everything else in full and answer with a generic 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response("Internal server error", code="INTERNAL_ERROR"),
    )


# =============================================================================
# Include Routers
# =============================================================================
API_PREFIX = "/api"

app.include_router(auth_router, prefix=API_PREFIX, tags=["Authentication"])
app.include_router(media_router, prefix=API_PREFIX, tags=["Media"])

# Uploaded images; the directory is created during startup
app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Returns the status of the API and the database connection.
    """
    connected = await main_db.is_available()
    return {
        "status": "OK",
        "message": "Server is running",
        "mongodb": "Connected" if connected else "Not Connected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
