"""Health check route."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.config import Settings
from app.routes.dependencies import get_app_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health(settings: Annotated[Settings, Depends(get_app_settings)]) -> dict[str, str]:
    return {
        "status": "OK",
        "timestamp": datetime.now(UTC).isoformat(),
        "environment": settings.environment,
    }
