"""
FastAPI Application Factory.

This module provides a clean, configurable FastAPI application setup.

Usage:
    # Development
    uvicorn api.app:create_app --factory --reload

    # Production
    uvicorn api.app:app --host 0.0.0.0 --port 8000 --workers 4

    # Or use the convenience function
    from api.app import create_app
    app = create_app()
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import get_settings
from core.logging import configure_logging, get_logger
from core.middleware import RequestTracingMiddleware


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Runs on startup:
    - Initialize logging
    - Report whether semantic search is available

    Runs on shutdown:
    - Log shutdown
    """
    settings = get_settings()

    configure_logging(
        json_logs=settings.is_production,
        log_level="DEBUG" if settings.debug else "INFO",
    )

    logger.info(
        "Starting storefront API",
        environment=settings.environment,
        port=settings.port,
        semantic_search=settings.semantic_search_configured,
    )
    if not settings.semantic_search_configured:
        logger.warning("Semantic search not configured; search falls back to name matching")

    yield  # Application is running

    logger.info("Shutting down storefront API")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title="Storefront API",
        description="""
        E-commerce storefront: catalog browsing with semantic search, cart,
        wishlist, checkout and order history.

        ## Main Endpoints

        - `/api/products` - Filter, sort and paginate the catalog; `search` is ranked semantically
        - `/api/products/by-ids` - Resolve product ids (order preserved)
        - `/api/categories` - Category levels
        - `/api/semantic-search` - Raw ranking passthrough
        - `/api/cart`, `/api/wishlist`, `/api/checkout`, `/api/orders` - Shopper flows
        - `/tools`, `/tools/execute` - MCP-compatible agent tools

        ## Health Checks

        - `/health` - Basic health check
        - `/health/detailed` - Detailed health with dependency status
        - `/ready` - Kubernetes readiness probe
        - `/live` - Kubernetes liveness probe
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.docs_enabled else None,
        redoc_url="/redoc" if settings.docs_enabled else None,
    )

    # =========================================================================
    # Middleware (order matters - first added = outermost)
    # =========================================================================

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request tracing (adds X-Request-ID, logs timing)
    app.add_middleware(RequestTracingMiddleware)

    # =========================================================================
    # Routes
    # =========================================================================

    from api.routes.health import router as health_router
    app.include_router(health_router, tags=["Health"])

    from api.routes.products import router as products_router
    app.include_router(products_router)

    from api.routes.cart import router as cart_router
    app.include_router(cart_router)

    from api.routes.wishlist import router as wishlist_router
    app.include_router(wishlist_router)

    from api.routes.orders import router as orders_router
    app.include_router(orders_router)

    from api.routes.tools import router as tools_router
    app.include_router(tools_router)

    return app


# Create default app instance for uvicorn
# Usage: uvicorn api.app:app
app = create_app()


def get_app() -> FastAPI:
    """Get the application instance (for ASGI servers)."""
    return app
