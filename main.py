"""
FastAPI Storefront Recommendation Service - Main Application
Product recommendations for the storefront: similar, popular, trending,
frequently bought together, recently viewed and personalized
"""
import logging
from datetime import datetime
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from storefront_reco.core.config import Settings, settings as default_settings
from storefront_reco.core.logging import configure_logging
from storefront_reco.routers import products, recommendations
from storefront_reco.services.recommendations import RecommendationEngine

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


def create_app(
    app_settings: Optional[Settings] = None,
    engine: Optional[RecommendationEngine] = None
) -> FastAPI:
    """
    Create the FastAPI application

    Args:
        app_settings: Settings (module settings if None)
        engine: Pre-built engine (built from settings on startup if None)
    """
    app_settings = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager
        Builds the engine on startup and sweeps its cache while running
        """
        # Startup
        logger.info("Starting application...")
        app.state.engine = engine or RecommendationEngine.from_settings(app_settings)
        logger.info("Recommendation engine ready: %s", list(app.state.engine.algorithms))

        scheduler: Optional[AsyncIOScheduler] = None
        if app_settings.ENABLE_CACHE_SWEEP:
            scheduler = AsyncIOScheduler()
            scheduler.add_job(
                app.state.engine.cache.cleanup_expired,
                trigger=IntervalTrigger(seconds=app_settings.RECOMMENDATION_CACHE_SWEEP_INTERVAL),
                id="cache_sweep",
                name="Expired recommendation cache sweep",
                replace_existing=True
            )
            scheduler.start()
            logger.info(
                "Cache sweep scheduled every %ss",
                app_settings.RECOMMENDATION_CACHE_SWEEP_INTERVAL
            )

        yield

        # Shutdown
        logger.info("Shutting down application...")
        if scheduler is not None and scheduler.running:
            scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Product recommendation API for the storefront",
        version=APP_VERSION,
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint - health check"""
        return {
            "message": "Storefront Recommendation Service API",
            "status": "running",
            "version": APP_VERSION,
            "timestamp": datetime.now().isoformat()
        }

    # Include routers
    app.include_router(products.router, prefix="/products", tags=["products"])
    app.include_router(recommendations.router, prefix="/recommendations", tags=["recommendations"])

    # 404 handler
    @app.exception_handler(404)
    async def not_found_handler(request, exc):
        detail = getattr(exc, "detail", None) or "Not found"
        return JSONResponse(
            status_code=404,
            content={"message": detail}
        )

    return app


configure_logging(level=logging.DEBUG if default_settings.DEBUG else logging.INFO)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting HTTP server on port %s", default_settings.PORT)
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=default_settings.PORT,
        reload=default_settings.DEBUG
    )
