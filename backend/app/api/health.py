"""Health check endpoints."""

import platform
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.services.healthcheck import get_health_checker, HealthStatus

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "python": platform.python_version(),
    }


@router.get("/health/services")
async def services_health():
    """
    Health check of all backing services.

    Checks:
    - API responsiveness
    - Supabase database and required tables
    - API key configuration
    """
    checker = get_health_checker()
    report = await checker.run_all_checks()

    return report.to_dict()


@router.get("/health/ready")
async def readiness_check():
    """
    Kubernetes-style readiness check.

    Returns 200 if the database is reachable, 503 otherwise.
    """
    checker = get_health_checker()
    report = await checker.run_all_checks()

    database = report.get("supabase")

    if database and database.status == HealthStatus.HEALTHY:
        return {"ready": True, "status": report.status.value}
    return JSONResponse(status_code=503, content={"ready": False, "status": report.status.value})


@router.get("/health/live")
async def liveness_check():
    """
    Kubernetes-style liveness check.

    If we can respond, we're alive.
    """
    return {"live": True, "timestamp": datetime.now(timezone.utc).isoformat()}
