"""
FastAPI application for Family Hub.

This is the main entry point for the HTTP API, providing:
- Cookie session authentication
- Family and membership endpoints
- Task (Eisenhower matrix) and event (calendar) endpoints
- Achievements, notifications and the family dashboard
- Health endpoint
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from src.api.auth_routes import router as auth_router
from src.api.engagement_routes import router as engagement_router
from src.api.event_routes import router as event_router
from src.api.family_routes import router as family_router
from src.api.middleware import RequestLoggingMiddleware, get_request_id
from src.api.models import HealthResponse
from src.api.response_builder import build_error_response
from src.api.task_routes import router as task_router
from src.auth import purge_expired_sessions
from src.config import get_settings
from src.database import check_connection, get_db_context, init_db
from src.logging_setup import setup_logging
from src.services import FamilyHubError

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# =============================================================================
# Application Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    setup_logging(settings.log_level)
    settings.validate_production_config()

    logger.info("Starting Family Hub API")
    if settings.auto_create_tables:
        init_db()
    with get_db_context() as db:
        purged = purge_expired_sessions(db)
    if purged:
        logger.info(f"Purged {purged} expired sessions")
    logger.info("Family Hub API started")

    yield

    logger.info("Shutting down Family Hub API")


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="Family Hub API",
    description="""
# Family Hub API

Shared tasks and calendar for a household.

## Core Resources

- **Tasks** are sorted into the Eisenhower matrix (quadrants 1-4).
  Completing a task awards its points to the assigned child.
- **Events** make up the family calendar (month, week and day views).
- **Achievements** and **notifications** belong to a single user.

## Authentication

`POST /api/auth/login` opens a session and sets a cookie; every other
`/api` endpoint requires it.

## Error Handling

- **400** - Invalid request (including validation errors)
- **401** - Missing or expired session
- **403** - Another family's resources, or a role that may not act
- **404** - Resource not found
- **500** - Server error
    """,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add middleware
app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(auth_router)
app.include_router(family_router)
app.include_router(task_router)
app.include_router(event_router)
app.include_router(engagement_router)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Wrap HTTP errors (including unknown routes) in the error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_response(
            "http_error", exc.detail, retryable=exc.status_code >= 500
        ),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Report request validation failures as 400."""
    return JSONResponse(
        status_code=400,
        content=build_error_response(
            "validation_error",
            "Invalid request",
            details=jsonable_encoder(exc.errors()),
        ),
    )


@app.exception_handler(FamilyHubError)
async def family_hub_exception_handler(request, exc: FamilyHubError):
    """Handle domain errors raised by services and dependencies."""
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_response(exc.error_type, exc.message),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Log anything unhandled and answer 500 without internals."""
    logger.error(
        f"[{get_request_id()}] Unhandled {type(exc).__name__} on {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content=build_error_response(
            "internal_error", "An unexpected error occurred", retryable=True
        ),
    )


# =============================================================================
# Health & Status Endpoints
# =============================================================================


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    tags=["System"],
)
def health_check() -> HealthResponse:
    """
    Check API health status.

    Returns:
        Health status including database connectivity
    """
    database_connected = check_connection()
    return HealthResponse(
        status="healthy" if database_connected else "unhealthy",
        version=API_VERSION,
        database_connected=database_connected,
    )


# =============================================================================
# Run with Uvicorn
# =============================================================================


def run_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False):
    """Run the API server with Uvicorn."""
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    settings = get_settings()
    run_server(host=settings.api_host, port=settings.api_port, reload=settings.api_reload)
