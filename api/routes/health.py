"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
import logging
import platform
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import ServiceContainer, get_container
from core.domain.value_objects import to_iso, utc_now


logger = logging.getLogger(__name__)
router = APIRouter()


async def _check(component: str, probe) -> Dict[str, Any]:
    try:
        return await probe()
    except Exception as e:
        logger.error(f"{component} health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}


@router.get("/health")
async def health_check(container: ServiceContainer = Depends(get_container)):
    """
    Health check endpoint.

    Returns store and channel health; 503 when either is unhealthy.
    """
    checks = {
        "store": await _check("Store", container.repository.health_check),
        "channel": await _check("Channel", container.channel.health_check),
    }
    healthy = all(c.get("status") == "healthy" for c in checks.values())

    body = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": to_iso(utc_now()),
        "service": container.settings.service.service_name,
        "version": "1.0.0",
        "python_version": platform.python_version(),
        "checks": checks,
    }
    if not healthy:
        logger.warning(f"Health check failed: {checks}")
    return JSONResponse(status_code=200 if healthy else 503, content=body)
