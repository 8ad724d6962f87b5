"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from sqlalchemy.engine import make_url
from starlette.responses import JSONResponse

from src.library.api.http.app_data import ApplicationDependencies

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 as long as the process is serving requests."""
    return {"status": "healthy", "service": "api"}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe.

    Returns 503 when the primary database is unreachable. The search index
    is reported but never fails the probe: writes still succeed without it
    and only keyword search degrades.
    """
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = app_deps.config

    checks: dict[str, Any] = {}
    all_healthy = True

    try:
        db_healthy = app_deps.database_service.health_check()
        checks["database"] = {
            "status": "healthy" if db_healthy else "unhealthy",
            "type": make_url(config.database.url).get_backend_name(),
        }
        if not db_healthy:
            all_healthy = False
    except Exception as e:
        checks["database"] = {"status": "unhealthy", "error": str(e)}
        all_healthy = False

    search_service = app_deps.search_service
    if search_service.is_enabled:
        search_healthy = await search_service.health_check()
        search_check: dict[str, Any] = {
            "status": "healthy" if search_healthy else "degraded",
            "address": search_service.address,
        }
        info = await search_service.get_info() if search_healthy else None
        if info:
            search_check["info"] = info
        checks["search"] = search_check
    else:
        checks["search"] = {
            "status": "disabled",
            "note": "Keyword search is not available",
        }

    checks["background_tasks"] = {"pending": app_deps.task_pool.pending}

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": checks,
    }

    if not all_healthy:
        return JSONResponse(status_code=503, content=response)

    return response
