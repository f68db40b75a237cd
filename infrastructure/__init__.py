# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Access to the site under inspection
# PURPOSE: Database, PHP runtime and configuration.php readers
# ============================================================================
"""
Infrastructure module for the health checker.

Provides:
- JoomlaDatabase: Read-only queries against the site database
- PhpRuntimeProbe: PHP runtime snapshot via the php binary or a JSON file
- load_site_configuration: configuration.php reader

Usage:
    from infrastructure import load_site_configuration, JoomlaDatabase

    site = load_site_configuration("/var/www/html/configuration.php")
    db = JoomlaDatabase.from_site(site)
"""

from infrastructure.database import (
    JoomlaDatabase,
    get_database,
    close_database,
)
from infrastructure.php_runtime import (
    PhpRuntimeProbe,
    PhpRuntimeError,
)
from infrastructure.joomla_config import (
    load_site_configuration,
    parse_configuration,
)

__all__ = [
    # Database
    "JoomlaDatabase",
    "get_database",
    "close_database",
    # PHP runtime
    "PhpRuntimeProbe",
    "PhpRuntimeError",
    # Site configuration
    "load_site_configuration",
    "parse_configuration",
]
