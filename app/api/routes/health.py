"""
Health and readiness check API endpoints
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from app.services.health_service import HealthService

router = APIRouter()
health_service = HealthService()


@router.get("/healthz")
async def liveness_check():
    """Basic health status indicating the process is serving requests"""
    return health_service.liveness_check()


@router.get("/readyz")
async def readiness_check():
    """
    Readiness status with component checks

    Returns 503 while the database is unreachable or an upstream key is missing
    """
    result = health_service.readiness_check()
    if result["status"] != "ready":
        return JSONResponse(status_code=503, content=result)
    return result
