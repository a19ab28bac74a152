"""
Routes Package
Aggregate all route routers
"""
from fastapi import APIRouter

# Import all routers
from .health import router as health_router
from .features import router as features_router
from .epics import router as epics_router
from .analytics import router as analytics_router

# Create main router
api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(features_router)
api_router.include_router(epics_router)
api_router.include_router(analytics_router)
