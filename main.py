# ============================================================================
# JOOMLA HEALTH CHECKER - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Serve the health report over HTTP
# ============================================================================
"""
Joomla Health Checker Main Application

FastAPI application that:
1. Loads the site configuration, PHP runtime snapshot and database handle
2. Registers the bundled health checks
3. Serves the report endpoints (/health, /health/export.html, ...)

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from __version__ import __version__, BUILD_DATE, CODENAME

from core.config import get_defaults
from health import health_router, get_registry, set_runner
from health.bootstrap import build_context, build_runner
from infrastructure import close_database

# Configure logging using our structured logging system
from core.logging import configure_logging, get_logger

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Builds the check context on startup, releases the database on shutdown.
    """
    logger.info(f"Starting {CODENAME} v{__version__} (Build {BUILD_DATE})")

    defaults = get_defaults()
    context = build_context(defaults)
    runner = build_runner(context, defaults)
    set_runner(runner)

    logger.info(
        f"Health checks initialized ({len(get_registry())} checks registered, "
        f"{len(runner.enabled_checks())} enabled)"
    )

    yield

    # Shutdown
    logger.info("Shutting down health checker...")

    runner.close()
    close_database()

    logger.info("Health checker stopped")


# Create FastAPI app
app = FastAPI(
    title="Joomla Health Checker",
    description="Diagnostic health checks for a Joomla site",
    version=__version__,
    lifespan=lifespan,
)

# Include health check routes (no prefix - /livez, /health, /health/...)
app.include_router(health_router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": CODENAME,
        "version": __version__,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
        "report": "/health/export.html",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
