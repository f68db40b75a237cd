# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# ============================================================================
"""
Models Module - Central Export Point

Pydantic models describing the site under inspection:
    - PhpRuntime: snapshot of the PHP interpreter
    - SiteConfiguration: Joomla global configuration values
"""

from core.models.php_runtime import OpcacheMemoryUsage, OpcacheStatus, PhpRuntime
from core.models.site_configuration import SiteConfiguration

__all__ = [
    # PHP runtime
    "PhpRuntime",
    "OpcacheStatus",
    "OpcacheMemoryUsage",
    # Site
    "SiteConfiguration",
]
