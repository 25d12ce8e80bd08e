"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request

from laundry_booking.core.config import get_settings

router = APIRouter()


@router.get("", summary="Service health status")
async def healthcheck(request: Request) -> dict[str, object]:
    """Return application health metadata."""
    settings = get_settings()
    controller = getattr(request.app.state, "admission_controller", None)
    return {
        "status": "ok",
        "service": settings.app_name,
        "timestamp": datetime.now(UTC).isoformat(),
        "environment": settings.app_env,
        "cache_version": controller.cache.version if controller else None,
    }
