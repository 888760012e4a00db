"""Health and readiness endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.api.dependencies import get_decision_engine
from src.config import settings
from src.domains.decision.engine import DecisionEngine

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    from src.main import get_uptime

    return {
        "status": "healthy",
        "version": settings.app_version,
        "uptime_seconds": get_uptime(),
    }


@router.get("/ready")
async def ready(
    engine: DecisionEngine = Depends(get_decision_engine),  # noqa: B008
) -> JSONResponse:
    """Ready while at least one configured provider can serve predictions."""
    ready_ok = any(p.is_available for p in engine.providers)
    return JSONResponse(
        status_code=200 if ready_ok else 503,
        content={
            "status": "ready" if ready_ok else "degraded",
            "providers": engine.source_ids,
            "provider_status": [p.status() for p in engine.providers],
        },
    )
