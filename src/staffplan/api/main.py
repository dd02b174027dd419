"""
staffplan API Main Application

Entry point for the FastAPI application.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from staffplan.platform.config import settings
from staffplan.platform.logging import configure_logging, get_logger
from staffplan.api.routers import analytics, kpis, recommendations, suggestions
from staffplan.api.dependencies import (
    init_resources,
    close_resources,
    get_database_adapter,
)

# Configure logging on import
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting staffplan API...")
    try:
        init_resources()
        logger.info("Resources initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize resources: {e}")
        raise

    yield

    logger.info("Shutting down staffplan API...")
    close_resources()
    logger.info("Resources closed.")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Utilization analytics and staffing recommendations",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================

@app.get("/health")
async def health() -> dict:
    """Liveness and database reachability."""
    adapter = get_database_adapter()
    return {
        "status": "ok",
        "version": settings.VERSION,
        "database": "up" if adapter.health_check() else "down",
    }


# =============================================================================
# ROUTERS
# =============================================================================

app.include_router(analytics.router, prefix="/api/v1/analytics", tags=["analytics"])
app.include_router(kpis.router, prefix="/api/v1/kpis", tags=["kpis"])
app.include_router(recommendations.router, prefix="/api/v1/recommendations", tags=["recommendations"])
app.include_router(suggestions.router, prefix="/api/v1/suggestions", tags=["suggestions"])


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "staffplan.api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
