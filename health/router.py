# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# STATUS: API - FastAPI health report endpoints
# PURPOSE: Run checks over HTTP and export reports
# ============================================================================
"""
Health Check Router

FastAPI router exposing the health checker.

Endpoints:
    GET /livez                    - Liveness probe (process is alive)
    GET /health                   - Full report (all enabled checks)
    GET /health/stats             - Counts and last run timestamp
    GET /health/metadata          - Categories, providers, check list
    GET /health/category/{slug}   - Checks of one category
    GET /health/check/{slug}      - Single check
    GET /health/export.json       - Full report as a JSON download
    GET /health/export.html       - Full report as a standalone HTML page

Response Codes (/health and /health/check/{slug}):
    200 - Good
    206 - Warning (partial content)
    503 - Critical (service unavailable)
"""

import json
import logging
import os

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from fastapi.templating import Jinja2Templates

from health.core import HealthStatus
from health.executor import HealthCheckRunner
from __version__ import __version__, BUILD_DATE

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["Health"])

templates = Jinja2Templates(
    directory=os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")
)


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# Set by the main app at startup

_runner = None


def set_runner(runner: HealthCheckRunner) -> None:
    """Set the runner used by the endpoints."""
    global _runner
    _runner = runner


def get_runner() -> HealthCheckRunner:
    if _runner is None:
        raise HTTPException(500, "Health check runner not initialized")
    return _runner


def _status_to_http_code(status: HealthStatus) -> int:
    """Map health status to HTTP status code."""
    return {
        HealthStatus.GOOD: 200,
        HealthStatus.WARNING: 206,  # Partial Content
        HealthStatus.CRITICAL: 503,  # Service Unavailable
    }[status]


# ============================================================================
# LIVENESS PROBE
# ============================================================================

@health_router.get("/livez")
async def liveness_probe():
    """
    Liveness probe.

    Confirms the process is responsive. Runs no checks.
    """
    return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}


# ============================================================================
# FULL REPORT
# ============================================================================

@health_router.get("/health")
async def full_health_check(runner: HealthCheckRunner = Depends(get_runner)):
    """
    Run every enabled check.

    Returns:
        200: All checks good
        206: At least one warning
        503: At least one critical result
    """
    report = await runner.run_all()

    body = report.to_dict()
    body["status"] = report.status.value
    body["version"] = __version__

    return JSONResponse(status_code=_status_to_http_code(report.status), content=body)


@health_router.get("/health/stats")
async def health_stats(runner: HealthCheckRunner = Depends(get_runner)):
    """Counts per status and the run timestamp."""
    return await runner.stats()


@health_router.get("/health/metadata")
async def health_metadata(runner: HealthCheckRunner = Depends(get_runner)):
    """Categories, providers and available checks, without running anything."""
    try:
        return runner.metadata()
    except RuntimeError as e:
        return JSONResponse(status_code=503, content={"error": str(e)})


# ============================================================================
# CATEGORY & SINGLE CHECK
# ============================================================================

@health_router.get("/health/category/{category}")
async def category_health_check(
    category: str,
    runner: HealthCheckRunner = Depends(get_runner),
):
    """Run the checks of one category."""
    results = await runner.run_category(category)
    return {
        "category": category,
        "results": {slug: r.to_dict() for slug, r in results.items()},
    }


@health_router.get("/health/check/{slug}")
async def single_health_check(
    slug: str,
    runner: HealthCheckRunner = Depends(get_runner),
):
    """
    Run a single health check by slug.

    Useful for debugging one finding.
    """
    result = await runner.run_single(slug)

    if result is None:
        return JSONResponse(
            status_code=404,
            content={"error": f"Health check not found: {slug}"},
        )

    return JSONResponse(status_code=_status_to_http_code(result.status), content=result.to_dict())


# ============================================================================
# EXPORTS (DOWNLOADS)
# ============================================================================

@health_router.get("/health/export.json")
async def export_json(runner: HealthCheckRunner = Depends(get_runner)):
    """Full report as a downloadable JSON file."""
    report = await runner.run_all()
    filename = f"health-report-{report.last_run:%Y-%m-%d}.json"

    return Response(
        content=json.dumps(report.to_dict(), indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@health_router.get("/health/export.html")
async def export_html(request: Request, runner: HealthCheckRunner = Depends(get_runner)):
    """Full report as a standalone HTML page."""
    report = await runner.run_all()
    filename = f"health-report-{report.last_run:%Y-%m-%d}.html"

    response = templates.TemplateResponse(
        request,
        "report.html",
        {
            "report": report,
            "categories": {c.slug: c for c in report.categories},
            "providers": {p.slug: p for p in report.providers},
            "version": __version__,
        },
    )
    response.headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "health_router",
    "set_runner",
    "get_runner",
]
