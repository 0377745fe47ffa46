# app.py - Main Application

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.gzip import GZipMiddleware

# Configuration
from upload_analytics.config.settings import get_settings

# Services
from upload_analytics.services.analytics_service import AnalyticsService
from upload_analytics.services.session_store import SessionStore

# API Routes
from upload_analytics.api.routes.datasets import router as datasets_router
from upload_analytics.api.routes.charts import router as charts_router

# Middleware
from upload_analytics.api.middleware.error_handling import ErrorHandlingMiddleware, setup_error_handlers
from upload_analytics.api.middleware.cors import (
    CORSConfig,
    create_development_cors_config,
    create_production_cors_config,
    setup_cors,
)

# Utilities
from upload_analytics.utils.logging_config import setup_logging

# Global settings
settings = get_settings()
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"

# Global service instances
_services = {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager - handles startup and shutdown
    """
    logger.info("🚀 Starting Upload Analytics API")

    try:
        await initialize_services()
        await startup_tasks()

        logger.info("✅ Application startup completed successfully")

        yield

    except Exception as e:
        logger.error(f"💥 Startup failed: {e}")
        raise

    finally:
        logger.info("🛑 Shutting down Upload Analytics API")
        await shutdown_services()
        logger.info("✅ Application shutdown completed")


async def initialize_services():
    """
    Initialize all application services
    """
    logger.info("🔧 Initializing services...")

    session_store = SessionStore(**settings.get_session_config())
    _services['session_store'] = session_store

    _services['analytics_service'] = AnalyticsService(session_store=session_store)

    logger.info("✅ All services initialized successfully")


async def startup_tasks():
    """
    Perform application startup tasks
    """
    logger.info("🔄 Performing startup tasks...")

    if settings.SESSION_TTL:
        _services['purge_task'] = asyncio.create_task(purge_expired_sessions())

    logger.info(f"📊 Environment: {settings.ENVIRONMENT}")
    logger.info(f"📁 Upload limit: {settings.MAX_UPLOAD_SIZE_MB}MB")
    logger.info(f"💾 Sessions: max {settings.MAX_SESSIONS}, ttl {settings.SESSION_TTL}s")


async def purge_expired_sessions():
    """
    Periodically drop expired sessions from the store
    """
    interval = max(settings.SESSION_TTL // 2, 30)
    session_store = _services['session_store']

    while True:
        await asyncio.sleep(interval)
        await session_store.purge_expired()


async def shutdown_services():
    """
    Clean shutdown of all services
    """
    logger.info("🧹 Cleaning up services...")

    purge_task = _services.get('purge_task')
    if purge_task:
        purge_task.cancel()
        try:
            await purge_task
        except asyncio.CancelledError:
            logger.debug("Session purge task cancelled")

    session_store = _services.get('session_store')
    if session_store:
        await session_store.clear()
        logger.info("✅ Session store cleared")

    _services.clear()


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application
    """
    # Setup logging first
    setup_logging()

    app = FastAPI(
        title="Upload Analytics API",
        description="Upload CSV or Excel files and get statistics, chart configurations and reports",
        version=APP_VERSION,
        docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan
    )

    # Add middleware (order matters!)

    # 1. Error handling (should be first)
    app.add_middleware(
        ErrorHandlingMiddleware,
        debug=settings.DEBUG
    )

    # 2. CORS
    if settings.ENVIRONMENT == "development":
        cors_config = create_development_cors_config(settings.ALLOWED_ORIGINS)
    elif settings.ENVIRONMENT == "production":
        cors_config = create_production_cors_config(settings.ALLOWED_ORIGINS)
    else:
        cors_config = CORSConfig(allow_origins=settings.ALLOWED_ORIGINS)
    setup_cors(app, config=cors_config, environment=settings.ENVIRONMENT)

    # 3. GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Setup error handlers
    setup_error_handlers(app)

    # Include routers
    app.include_router(datasets_router)
    app.include_router(charts_router)

    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "message": "Upload Analytics API",
            "version": APP_VERSION,
            "status": "operational",
            "timestamp": datetime.now().isoformat(),
            "docs": "/docs" if settings.ENVIRONMENT != "production" else "Documentation disabled in production",
            "endpoints": {
                "datasets": "/api/datasets",
                "charts": "/api/charts",
                "health": "/health"
            },
            "limits": {
                "max_upload_size_mb": settings.MAX_UPLOAD_SIZE_MB,
                "allowed_extensions": settings.ALLOWED_EXTENSIONS
            }
        }

    @app.get("/health")
    async def simple_health_check():
        """Simple health check endpoint for load balancers"""
        analytics_service = _services.get('analytics_service')
        return {
            "status": "healthy" if analytics_service else "starting",
            "timestamp": datetime.now().isoformat(),
            "sessions": analytics_service.session_store.get_stats() if analytics_service else None
        }

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time to response headers"""
        start_time = datetime.now()
        response = await call_next(request)
        process_time = (datetime.now() - start_time).total_seconds()
        response.headers["X-Process-Time"] = str(round(process_time, 3))
        return response

    logger.info("🎯 FastAPI application configured successfully")

    return app


# Dependency injection functions
async def get_analytics_service() -> AnalyticsService:
    """Get analytics service instance"""
    service = _services.get('analytics_service')
    if not service:
        raise HTTPException(
            status_code=503,
            detail="Analytics service not available"
        )
    return service


# Create the application instance
app = create_application()


def main():
    import uvicorn

    uvicorn.run(
        "upload_analytics.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info" if not settings.DEBUG else "debug",
        access_log=True
    )


# Main entry point
if __name__ == "__main__":
    main()
