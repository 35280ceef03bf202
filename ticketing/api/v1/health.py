"""
Health check endpoints for the Ticketing Service.
"""

import logging
import time

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from ticketing.core.config import config
from ticketing.db.database import db_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

START_TIME = time.time()


@router.get("")
async def health_check():
    """
    Health check endpoint.

    Returns:
        Service status, environment, uptime in seconds and database connectivity
    """
    database_ok = db_manager.health_check()
    return {
        "success": True,
        "status": "OK",
        "environment": await config.get_environment(),
        "uptime": round(time.time() - START_TIME, 3),
        "database": "connected" if database_ok else "disconnected",
    }


@router.get("/db")
async def database_health_check():
    """Report database connectivity, 503 when the database does not answer."""
    if db_manager.health_check():
        return {"success": True, "database": "connected"}

    logger.warning("Database health check reported disconnected")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"success": False, "database": "disconnected"},
    )
