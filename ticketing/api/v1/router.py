"""
Main API router for the Ticketing Service.
Combines all API endpoints under /api.
"""

from fastapi import APIRouter

from ticketing.api.v1.analytics import router as analytics_router
from ticketing.api.v1.auth import router as auth_router
from ticketing.api.v1.bookings import router as bookings_router
from ticketing.api.v1.events import router as events_router
from ticketing.api.v1.health import router as health_router
from ticketing.api.v1.notifications import router as notifications_router
from ticketing.api.v1.tickets import router as tickets_router

# Create main router
router = APIRouter(prefix="/api")

router.include_router(auth_router)
router.include_router(events_router)
router.include_router(tickets_router)
router.include_router(bookings_router)
router.include_router(analytics_router)
router.include_router(notifications_router)
router.include_router(health_router)
