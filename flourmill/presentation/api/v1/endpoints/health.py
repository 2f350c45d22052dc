"""Health check endpoint — no dependencies, always available."""

from fastapi import APIRouter

from flourmill.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Returns the application status and which record backend is active."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "record_backend": settings.record_backend,
    }
