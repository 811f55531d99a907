"""
FastAPI application entry point for the event dashboard backend.

This module initializes the FastAPI application with:
- CORS middleware for the dashboard frontend
- Exception handlers that answer with ActionResult-shaped errors
- Lifespan handlers for startup and shutdown logging
- Logging configuration

Environment Variables:
    EVENTDASH_ENV: Environment (production/development, default: development)
    EVENTDASH_LOG_LEVEL: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL, default: INFO)
    EVENTDASH_DB_URL: Database URL (default: sqlite:///./eventdash.db)
    EVENTDASH_CORS_ORIGINS: Comma-separated allowed origins
"""

from contextlib import asynccontextmanager
from typing import Dict, Any, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from backend.src.api.responses import (
    failure_response, service_error_fields, service_error_status,
)
from backend.src.config.settings import get_settings
from backend.src.db.database import dispose_engine
from backend.src.services.exceptions import ServiceError
from backend.src.utils.logging_config import init_logging, get_logger


APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: log configuration
    - Shutdown: dispose of pooled database connections

    Args:
        app: FastAPI application instance

    Yields:
        Control to the application
    """
    logger = get_logger("api")
    settings = get_settings()
    logger.info(
        "Starting event dashboard backend",
        extra={"income_category": settings.income_category_name},
    )

    yield

    logger.info("Shutting down event dashboard backend")
    dispose_engine()


# Initialize logging before creating app
init_logging()

app = FastAPI(
    title="Event Dashboard API",
    description="Backend API for the event management dashboard. "
                "Keeps staff assignments, sponsors and the event budget consistent "
                "and serves the event agenda.",
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers


def _field_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """Group Pydantic error entries by the last element of their location."""
    fields: Dict[str, List[str]] = {}
    for error in errors:
        loc = error.get("loc") or ("body",)
        fields.setdefault(str(loc[-1]), []).append(error.get("msg", "Invalid value"))
    return fields


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body/query validation errors.

    Returns:
        422 ActionResult with per-field messages
    """
    logger = get_logger("api")
    logger.warning(
        "Validation error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": exc.errors(),
        }
    )

    return failure_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation failed",
        _field_errors(exc.errors()),
    )


@app.exception_handler(ServiceError)
async def service_exception_handler(
    request: Request, exc: ServiceError
) -> JSONResponse:
    """
    Handle business-rule failures raised by the service layer.

    Returns:
        404 / 400 / 409 ActionResult with the service message
    """
    status_code = service_error_status(exc)
    logger = get_logger("api")
    logger.info(
        f"{type(exc).__name__}: {exc}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": status_code,
        }
    )

    return failure_response(status_code, str(exc), service_error_fields(exc))


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """
    Handle SQLAlchemy database errors.

    Returns:
        500 ActionResult with a generic message
    """
    logger = get_logger("db")
    logger.error(
        "Database error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
        }
    )

    return failure_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An error occurred while accessing the database. Please try again later.",
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Handle all other unhandled exceptions.

    Returns:
        500 ActionResult with a generic message
    """
    logger = get_logger("api")
    logger.error(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error": str(exc),
        },
        exc_info=True,
    )

    return failure_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
    )


# Health check endpoint


@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        Health status and application information
    """
    return {
        "status": "healthy",
        "service": "eventdash-backend",
        "version": APP_VERSION,
    }


# API routers
from backend.src.api import agenda, budget, events, sponsors, staff, staff_assignments

app.include_router(events.router, prefix="/api")
app.include_router(staff.router, prefix="/api")
app.include_router(budget.router, prefix="/api")
app.include_router(staff_assignments.router, prefix="/api")
app.include_router(sponsors.router, prefix="/api")
app.include_router(agenda.router, prefix="/api")


# Root endpoint


@app.get("/", tags=["Root"])
async def root() -> Dict[str, str]:
    """
    Root endpoint with API information.

    Returns:
        API metadata and documentation links
    """
    return {
        "message": "Event Dashboard API",
        "version": APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "openapi": "/openapi.json",
    }
