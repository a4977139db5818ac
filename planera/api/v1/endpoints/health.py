"""Health check endpoints."""

from fastapi import APIRouter

from planera.core.config import settings
from planera.infra.database import db_manager

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness plus database connectivity."""
    database = "ok" if await db_manager.health_check() else "unavailable"
    return {"status": "healthy", "database": database, "version": settings.APP_VERSION}
