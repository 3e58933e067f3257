# app/routers/health.py

from fastapi import APIRouter

from app.config import get_settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "service": "facility-reporting-api",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness check - reports whether the store is configured."""
    settings = get_settings()
    return {
        "status": "ready",
        "checks": {
            "database": "configured" if settings.supabase_url else "missing",
        }
    }
