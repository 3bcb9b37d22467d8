"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from arthub.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from arthub.api.v1.endpoints import collect, health, sales, settlements

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(collect.router, prefix="/gallery", tags=["gallery"])
api_router.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
api_router.include_router(sales.router, prefix="/sales", tags=["sales"])
