"""
Folio API Application Entry Point

FastAPI application setup with all routers, middleware, and lifecycle management.

Application Architecture:
=========================
┌─────────────────────────────────────────────────────────────────────────────┐
│                           FOLIO API                                         │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │                    Middleware Stack                          │          │
│   │  ┌─────────────────────────────────────────────────────┐    │          │
│   │  │ CORS Middleware                                      │    │          │
│   │  │ Request Context (request id in logs)                 │    │          │
│   │  │ Error Handler                                        │    │          │
│   │  └─────────────────────────────────────────────────────┘    │          │
│   └─────────────────────────────────────────────────────────────┘          │
│                              │                                              │
│                              ▼                                              │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │                       Routers                                │          │
│   │  ┌────────┐ ┌───────┐ ┌──────────┐ ┌──────────┐ ┌───────┐  │          │
│   │  │ Health │ │ Feeds │ │ Projects │ │ Comments │ │ Users │  │          │
│   │  └────────┘ └───────┘ └──────────┘ └──────────┘ └───────┘  │          │
│   │  ┌─────────┐ ┌───────────────┐ ┌─────────────┐             │          │
│   │  │ Follows │ │ Notifications │ │ Collections │             │          │
│   │  └─────────┘ └───────────────┘ └─────────────┘             │          │
│   └─────────────────────────────────────────────────────────────┘          │
│                              │                                              │
│                              ▼                                              │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │                Dependencies (Injected)                       │          │
│   │  ┌──────────┐ ┌──────────┐ ┌──────────┐ ┌──────────┐       │          │
│   │  │ Database │ │   Auth   │ │  Cache   │ │ Services │       │          │
│   │  └──────────┘ └──────────┘ └──────────┘ └──────────┘       │          │
│   └─────────────────────────────────────────────────────────────┘          │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Lifecycle:
==========
1. create_application() builds the CacheService (Redis tier only when
   REDIS_URL is set) and stores it on app.state.cache
2. Application starts → lifespan startup: database check, cache sweeper
3. Application serves requests
4. Application stops → lifespan shutdown: sweeper stopped, Redis and
   database pools closed

Usage:
======
    # Run with uvicorn
    uvicorn src.api.main:app --host 0.0.0.0 --port 8000 --reload

    # Or programmatically
    from src.api.main import create_application
    app = create_application()
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config.settings import settings
from src.shared.adapters.redis_adapter import build_redis_adapter
from src.shared.db import init_db, close_db
from src.shared.core.logging import logger
from src.shared.services.cache_service import CacheService
from src.api.middleware import setup_exception_handlers, setup_request_context
from src.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Startup:
    - Verify database connectivity
    - Start the periodic cache sweep

    Shutdown:
    - Stop the sweep and close the Redis pool
    - Close database connections
    """
    # ═══════════════════════════════════════════════════════════════════════════
    # STARTUP
    # ═══════════════════════════════════════════════════════════════════════════
    logger.info(
        "Starting Folio API",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
    )

    if settings.is_production and settings.SECRET_KEY.startswith("change-me"):
        logger.warning("SECRET_KEY is still the development default")

    await init_db()

    cache: CacheService = app.state.cache
    cache.start_sweeper()

    logger.info("Folio API started successfully", remote_cache=cache.remote is not None)

    yield

    # ═══════════════════════════════════════════════════════════════════════════
    # SHUTDOWN
    # ═══════════════════════════════════════════════════════════════════════════
    logger.info("Shutting down Folio API")

    await cache.close()
    await close_db()

    logger.info("Folio API shutdown complete")


def create_application(cache: Optional[CacheService] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        cache: CacheService to share across requests (built from settings
            when omitted)

    Returns:
        Configured FastAPI application instance

    This factory function:
    1. Creates the FastAPI app with settings
    2. Attaches the cache
    3. Adds middleware (CORS, etc.)
    4. Sets up exception handlers
    5. Registers all routes
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="Creative portfolio and social feed API",
        version=settings.APP_VERSION,
        # Only show docs in development
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        # Use lifespan for startup/shutdown
        lifespan=lifespan,
    )

    app.state.cache = cache or CacheService(build_redis_adapter())

    # ═══════════════════════════════════════════════════════════════════════════
    # MIDDLEWARE
    # ═══════════════════════════════════════════════════════════════════════════

    # CORS Middleware - Must be added first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_request_context(app)

    # ═══════════════════════════════════════════════════════════════════════════
    # EXCEPTION HANDLERS
    # ═══════════════════════════════════════════════════════════════════════════

    setup_exception_handlers(app)

    # ═══════════════════════════════════════════════════════════════════════════
    # ROUTES
    # ═══════════════════════════════════════════════════════════════════════════

    register_routes(app)

    return app


# Create the application instance
app = create_application()
