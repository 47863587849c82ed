"""
Health check and system status endpoints.

Provides endpoints for:
- Basic health check
- Detailed system status
- Catalog readiness checks
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Optional
import time

from snaptheplant.core.config import get_settings

router = APIRouter(prefix="/health", tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: float
    version: str


class DetailedHealthResponse(BaseModel):
    """Detailed health check with component status."""
    status: str
    timestamp: float
    version: str
    components: dict[str, dict]
    uptime_seconds: Optional[float] = None


# Track startup time
_startup_time: Optional[float] = None


def set_startup_time() -> None:
    """Set the startup time (called on app startup)."""
    global _startup_time
    _startup_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns:
        Simple health status indicating the service is running.
    """
    return HealthResponse(
        status="healthy",
        timestamp=time.time(),
        version=get_settings().app_version
    )


@router.get("/ready", response_model=DetailedHealthResponse)
async def readiness_check() -> DetailedHealthResponse:
    """
    Detailed readiness check.

    Verifies:
    - The species catalog is loaded and not empty
    - The persistent store answers
    - Which generative endpoints are configured

    An unconfigured analyzer or generator is reported but does not make
    the service unready; the quiz and the fallbacks still work.

    Returns:
        Detailed status of all components.
    """
    from snaptheplant.core.dependencies import get_analyzer, get_catalog, get_store

    settings = get_settings()
    components = {}
    overall_healthy = True

    # Check persistent store
    try:
        store = get_store()
        store.keys("species:")
        components["store"] = {
            "status": "ready",
            "backend": settings.store_backend,
        }
    except Exception as e:
        components["store"] = {
            "status": "error",
            "error": str(e)
        }
        overall_healthy = False

    # Check species catalog
    try:
        catalog = get_catalog()
        if len(catalog) == 0:
            catalog.reload()
        components["catalog"] = {
            "status": "ready" if len(catalog) else "empty",
            "num_species": len(catalog),
        }
        if not len(catalog):
            overall_healthy = False
    except Exception as e:
        components["catalog"] = {
            "status": "error",
            "error": str(e)
        }
        overall_healthy = False

    components["analyzer"] = {
        "status": "ready" if settings.vision_api_url else "unconfigured",
        "name": get_analyzer().name,
    }
    components["generators"] = {
        "image": "configured" if settings.image_api_url else "placeholder",
        "story": "configured" if settings.story_api_url else "fallback",
    }

    uptime = None
    if _startup_time:
        uptime = time.time() - _startup_time

    if not overall_healthy:
        raise HTTPException(status_code=503, detail="Service not ready")

    return DetailedHealthResponse(
        status="ready",
        timestamp=time.time(),
        version=settings.app_version,
        components=components,
        uptime_seconds=uptime
    )


@router.get("/live")
async def liveness_check() -> dict:
    """
    Simple liveness probe for Kubernetes.

    Returns 200 if the process is running.
    """
    return {"status": "alive"}
