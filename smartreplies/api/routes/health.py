"""Health check endpoints."""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from smartreplies.api.schemas import HealthResponse, ServiceHealth
from smartreplies.core.config import get_settings
from smartreplies.db.session import check_db_health
from smartreplies.services.generation import get_generation_service

router = APIRouter(tags=["Health"])


async def _timed_health_check(
    check_fn: Any,
    timeout: float = 5.0,
) -> tuple[bool, float, str | None]:
    """Execute a health check and measure its latency with timeout.

    Returns:
        Tuple of (healthy, latency_ms, error_message)
    """
    start = time.perf_counter()
    try:
        result = await asyncio.wait_for(check_fn(), timeout=timeout)
        return (result, (time.perf_counter() - start) * 1000, None)
    except asyncio.TimeoutError:
        return (False, (time.perf_counter() - start) * 1000, f"Health check timed out after {timeout}s")
    except Exception as e:
        return (False, (time.perf_counter() - start) * 1000, str(e))


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check() -> HealthResponse:
    """
    Report database connectivity, payment and generation configuration.

    Missing Stripe credentials degrade the service without making it
    unhealthy: reply generation still works.
    """
    settings = get_settings()
    overall_status = "healthy"

    healthy, latency, error = await _timed_health_check(check_db_health)
    db_details: dict[str, Any] = {"url_scheme": settings.processed_database_url.split(":", 1)[0]}
    if error:
        db_details["error"] = error
    services: dict[str, ServiceHealth] = {
        "database": ServiceHealth(
            status="healthy" if healthy else "unhealthy",
            latency_ms=round(latency, 2),
            details=db_details,
        )
    }
    if not healthy:
        overall_status = "unhealthy"

    services["payments"] = ServiceHealth(
        status="healthy" if settings.stripe_configured else "degraded",
        details={"provider": "stripe", "configured": settings.stripe_configured},
    )
    if not settings.stripe_configured and overall_status == "healthy":
        overall_status = "degraded"

    services["generation"] = ServiceHealth(
        status="healthy",
        details={"provider": get_generation_service().provider_name},
    )

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
        services=services,
    )


@router.get("/health/live", summary="Liveness probe")
async def liveness() -> dict[str, str]:
    """Returns 200 while the process is running."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready", summary="Readiness probe")
async def readiness() -> JSONResponse:
    """Returns 503 until the database answers."""
    healthy, _, error = await _timed_health_check(check_db_health)

    if not healthy:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": error or "database_unavailable",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
