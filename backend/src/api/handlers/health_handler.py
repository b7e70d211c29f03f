"""
Health Check Handler

Provides health check endpoints for monitoring and load balancers.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from src.api.dependencies import Cache
from src.config.settings import settings
from src.shared.db import check_db_health
from src.shared.schemas.common import HealthResponse


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Basic health check endpoint.

    Returns:
        HealthResponse with service status
    """
    return HealthResponse(
        status="healthy",
        service=settings.APP_NAME.lower(),
        version=settings.APP_VERSION,
    )


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(cache: Cache):
    """
    Readiness check for Kubernetes/load balancers.

    The database must answer. An unreachable remote cache is reported but
    does not fail readiness, since the memory tier takes over.
    """
    checks = {
        "database": await check_db_health(),
        "cache": await cache.check_health(),
    }
    response = HealthResponse(
        status="ready" if checks["database"] else "unavailable",
        service=settings.APP_NAME.lower(),
        version=settings.APP_VERSION,
        checks=checks,
    )
    if not checks["database"]:
        return JSONResponse(status_code=503, content=response.model_dump(mode="json"))
    return response


@router.get("/live")
async def liveness_check():
    """
    Liveness check for Kubernetes.

    Returns:
        Simple alive status
    """
    return {"status": "alive"}
