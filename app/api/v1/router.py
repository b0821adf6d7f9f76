"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import adaptation, cycle, routines, weather

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    cycle.router, prefix="/cycle", tags=["Menstrual cycle"]
)
api_router.include_router(
    weather.router, prefix="/weather", tags=["Weather"]
)
api_router.include_router(
    routines.router, prefix="/routines", tags=["Routines"]
)
api_router.include_router(
    adaptation.router, prefix="/adaptation", tags=["Adaptation engine"]
)
