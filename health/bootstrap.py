# ============================================================================
# HEALTH CHECK BOOTSTRAP
# ============================================================================
# STATUS: Core - Wiring for the API and the CLI
# PURPOSE: Build the check context and runner from configuration
# ============================================================================
"""
Health Check Bootstrap

Shared by main.py and tools/run_checks.py:

    defaults = get_defaults()
    context = build_context(defaults)
    runner = build_runner(context, defaults)

Each collaborator is loaded independently. A failure is logged and the
collaborator is left as None; checks that need it then report a Warning
instead of the whole run failing.
"""

import logging
from typing import Optional

from core.config import Defaults, get_defaults
from core.models import PhpRuntime, SiteConfiguration
from health.core import HealthCheckContext
from health.executor import HealthCheckRunner
from infrastructure import (
    JoomlaDatabase,
    PhpRuntimeError,
    PhpRuntimeProbe,
    get_database,
    load_site_configuration,
)

logger = logging.getLogger(__name__)


def load_site(defaults: Defaults) -> Optional[SiteConfiguration]:
    path = defaults.site.configuration_path
    try:
        site = load_site_configuration(path)
    except (OSError, ValueError) as e:
        logger.warning(f"Site configuration unavailable ({path}): {e}")
        return None

    logger.info(f"Loaded site configuration from {path} (mailer={site.mailer}, dbtype={site.dbtype})")
    return site


def load_runtime(defaults: Defaults) -> Optional[PhpRuntime]:
    probe = PhpRuntimeProbe(
        php_binary=defaults.site.php_binary,
        snapshot_file=defaults.site.php_snapshot_file,
    )
    try:
        return probe.collect()
    except PhpRuntimeError as e:
        logger.warning(f"PHP runtime snapshot unavailable: {e}")
        return None


def load_database(
    defaults: Defaults,
    site: Optional[SiteConfiguration],
) -> Optional[JoomlaDatabase]:
    """Database handle from DATABASE_URL or configuration.php."""
    try:
        if site is None:
            if not defaults.database.url:
                logger.warning("No database configured (no configuration.php, no DATABASE_URL)")
                return None
            return JoomlaDatabase(
                url=defaults.database.url,
                prefix=defaults.database.prefix or "jos_",
                pool_min_size=defaults.database.pool_min_size,
                pool_max_size=defaults.database.pool_max_size,
            )
        return get_database(site, defaults.database)
    except ValueError as e:
        logger.warning(f"Database unavailable: {e}")
        return None


def build_context(defaults: Optional[Defaults] = None) -> HealthCheckContext:
    """Load site, PHP runtime and database into a check context."""
    defaults = defaults or get_defaults()

    site = load_site(defaults)
    runtime = load_runtime(defaults)
    database = load_database(defaults, site)

    return HealthCheckContext(
        site_root=defaults.site.root,
        site=site,
        database=database,
        runtime=runtime,
        http=defaults.http,
    )


def build_runner(
    context: HealthCheckContext,
    defaults: Optional[Defaults] = None,
) -> HealthCheckRunner:
    """Runner over the global registry with configured toggles and limits."""
    defaults = defaults or get_defaults()

    # Register all health check plugins
    import health.checks  # noqa: F401

    return HealthCheckRunner(
        context,
        toggles=defaults.toggles,
        max_parallel=defaults.runner.max_parallel,
        check_timeout=defaults.runner.check_timeout,
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "build_context",
    "build_runner",
    "load_site",
    "load_runtime",
    "load_database",
]
