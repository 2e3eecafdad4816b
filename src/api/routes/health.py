"""
Health check endpoints.

Provides endpoints for monitoring application health and status.
"""

from typing import Any, Dict

from fastapi import APIRouter

from config.constants import TABLES
from config.database import StoreError, execute_query, get_supabase_client_optional
from config.settings import get_settings


router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        Health status with basic info
    """
    return {
        "status": "healthy",
        "service": "storefront-api",
    }


@router.get("/health/detailed")
def detailed_health_check() -> Dict[str, Any]:
    """
    Detailed health check with dependency status.

    Checks:
    - Supabase connection (one-row products read)
    - Semantic search configuration (not probed; it is optional)
    """
    settings = get_settings()

    store_status = "unknown"
    store_error = None
    client = get_supabase_client_optional()
    if client is None:
        store_status = "not_configured"
    else:
        try:
            result = execute_query(
                client.table(TABLES.PRODUCTS).select("id").limit(1),
                "health_check",
            )
            store_status = "connected" if result.data else "empty"
        except StoreError as e:
            store_status = "error"
            store_error = str(e)

    if not settings.semantic_search_enabled:
        semantic_status = "disabled"
    elif settings.semantic_search_configured:
        semantic_status = "configured"
    else:
        semantic_status = "not_configured"

    return {
        "status": "healthy" if store_status == "connected" else "degraded",
        "service": "storefront-api",
        "environment": settings.environment,
        "checks": {
            "config": "ok",
            "supabase": {
                "status": store_status,
                "error": store_error,
            },
            "semantic_search": {
                "status": semantic_status,
                "timeout_seconds": settings.semantic_search_timeout_seconds,
                "candidate_count": settings.semantic_candidate_count,
            },
        },
    }


@router.get("/ready")
async def readiness_check() -> Dict[str, str]:
    """
    Kubernetes-style readiness probe.

    Returns 200 if the service is ready to accept traffic.
    """
    client = get_supabase_client_optional()
    if client is None:
        return {"status": "not_ready", "reason": "database_not_configured"}

    return {"status": "ready"}


@router.get("/live")
async def liveness_check() -> Dict[str, str]:
    """
    Kubernetes-style liveness probe.

    Returns 200 if the service is alive.
    """
    return {"status": "alive"}
