# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# STATUS: Core - Health check plugin system
# PURPOSE: Diagnostic checks for a Joomla site and their runner
# ============================================================================
"""
Health Check Module

Plugin-based health checks for a Joomla site:
- /health: every enabled check, as JSON (also /health/export.json|html)
- tools/run_checks.py: the same from the command line

Architecture:
- HealthCheckPlugin: Base class for health checks
- HealthCheckRegistry: Check, category and provider registration
- HealthCheckRunner: Parallel execution with timeouts, builds HealthReport

Usage:
    from health import register_check, HealthCheckPlugin

    @register_check(category="system")
    class MyCheck(HealthCheckPlugin):
        slug = "system.my_check"

        def perform_check(self) -> HealthCheckResult:
            return self.good("All fine.")

    # Register the bundled checks
    import health.checks
"""

from health.core import (
    HealthStatus,
    HealthCategory,
    ProviderMetadata,
    HealthCheckResult,
    HealthCheckContext,
    HealthCheckPlugin,
)
from health.registry import (
    HealthCheckRegistry,
    register_check,
    register_category,
    register_provider,
    get_registry,
)
from health.executor import HealthCheckRunner, HealthReport
from health.router import health_router, set_runner

__all__ = [
    # Core types
    "HealthStatus",
    "HealthCategory",
    "ProviderMetadata",
    "HealthCheckResult",
    "HealthCheckContext",
    "HealthCheckPlugin",
    # Registry
    "HealthCheckRegistry",
    "register_check",
    "register_category",
    "register_provider",
    "get_registry",
    # Runner
    "HealthCheckRunner",
    "HealthReport",
    # Router
    "health_router",
    "set_runner",
]
