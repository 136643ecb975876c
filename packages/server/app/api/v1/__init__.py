"""
API v1 Router

Event registration endpoints live under /events.
"""

from fastapi import APIRouter
from . import registrations

router = APIRouter()

router.include_router(registrations.router, prefix="/events", tags=["Registrations"])


@router.get("/", tags=["API"])
async def api_root():
    """API root: returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/events/user/register",
            "/events/user/registrations",
            "/events/subscriptions/all",
        ],
    }
