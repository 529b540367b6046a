"""
Health check endpoints.

These are the only routes that do not require authentication.
"""

from typing import Any, Dict

from fastapi import APIRouter

from config.settings import get_settings, provider_key
from relevance.llm import MODEL_REGISTRY


router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Reports which model providers have a key configured, without calling them.
    """
    settings = get_settings()
    providers = sorted({spec.provider for spec in MODEL_REGISTRY.values()})

    return {
        "status": "healthy",
        "service": "generative-relevance",
        "environment": settings.environment,
        "default_model": settings.default_model,
        "providers": {
            provider: provider_key(settings, provider) is not None
            for provider in providers
        },
    }


@router.get("/live")
async def liveness_check() -> Dict[str, str]:
    """
    Kubernetes-style liveness probe.

    Returns 200 if the service is alive.
    """
    return {"status": "alive"}
