"""
Main FastAPI application for the Ticketing Service.
Handles application startup, middleware, error rendering and routing.
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ticketing.api.v1.router import router as api_router
from ticketing.core.config import config
from ticketing.core.exceptions import TicketingError
from ticketing.db.database import db_manager
from ticketing.services.booking_service import booking_service
from ticketing.services.jwt_service import jwt_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting Ticketing Service...")

    try:
        await db_manager.initialize()
        logger.info("Database manager initialized")

        try:
            db_manager.create_tables()
        except Exception as e:
            logger.warning(f"Database tables may already exist: {e}")

        await jwt_service.initialize()
        await booking_service.initialize()

        logger.info("Ticketing Service started successfully")

    except Exception as e:
        logger.error(f"Failed to start Ticketing Service: {e}")
        raise

    yield

    # Shutdown
    logger.info("Shutting down Ticketing Service...")

    try:
        await db_manager.close()
        await config.close()
        logger.info("Ticketing Service shut down successfully")

    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


# Create FastAPI application
app = FastAPI(
    title="Evently Ticketing Service",
    description="Event management and ticketing API for Evently",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

cors_origins = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add request processing time to response headers."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


def _error_response(status_code: int, error_code: str, message, **extra) -> JSONResponse:
    content = {
        "success": False,
        "error_code": error_code,
        "message": message,
        "timestamp": datetime.now().isoformat(),
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def _format_validation_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        # Drop the "body" / "query" / "path" prefix
        field = ".".join(loc[1:]) or (loc[0] if loc else "request")
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, []).append(message)
    return errors


@app.exception_handler(TicketingError)
async def ticketing_exception_handler(request: Request, exc: TicketingError):
    """Render domain errors raised by services."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.error_code} on {request.url.path}: {exc.message}")

    extra = {"details": exc.details} if exc.details else {}
    return _error_response(exc.status_code, exc.error_code, exc.message, **extra)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """HTTP exception handler for FastAPI HTTP exceptions."""
    logger.warning(f"HTTP exception: {exc.status_code} - {exc.detail}")

    response = _error_response(exc.status_code, "HTTP_ERROR", exc.detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render request validation failures as 400 with per-field messages."""
    errors = _format_validation_errors(exc)
    logger.warning(f"Validation failed on {request.url.path}: {errors}")
    return _error_response(400, "VALIDATION_ERROR", "Validation failed", errors=errors)


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity error on {request.url.path}: {exc.orig}")
    return _error_response(400, "INTEGRITY_ERROR", "Duplicate or invalid reference")


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    extra = {}
    if await config.get_environment() == "development":
        extra["details"] = {"exception": str(exc)}
    return _error_response(500, "INTERNAL_SERVER_ERROR", "Internal server error", **extra)


# Include API router
app.include_router(api_router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with service information."""
    return {
        "service": "Evently Ticketing Service",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "api": "/api",
            "health": "/api/health",
            "docs": "/docs",
            "redoc": "/redoc"
        }
    }


# Health check endpoint (simple)
@app.get("/health")
async def simple_health_check():
    """Simple health check endpoint."""
    return {"status": "healthy", "service": "ticketing"}
