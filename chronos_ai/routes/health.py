from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from ..config import settings
from ..providers import provider_ids
from ..services import NarrativeAIService
from .dependencies import get_service

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health")
async def health_check(service: NarrativeAIService = Depends(get_service)):
    """Health check endpoint"""
    ai_settings = service.settings.to_ai_settings()
    circuits = {provider: service.breaker.get_stats(provider) for provider in provider_ids()}

    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.api_version,
        "checks": {
            "providers": ai_settings.configured_providers(),
            "circuits": circuits,
            "cache_entries": len(service.cache),
        }
    }

    if not ai_settings.has_configured_provider():
        health_status["status"] = "degraded"
    elif all(stats["state"] == "open" for provider, stats in circuits.items()
             if ai_settings.is_configured(provider)):
        health_status["status"] = "unhealthy"

    return health_status
