"""API v1 router configuration.
"""

from fastapi import APIRouter

from .health import router as health_router
from .subscriptions import router as subscriptions_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(subscriptions_router, tags=["subscriptions"])
