# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the health checker.
"""

from core.config.defaults import (
    SiteDefaults,
    HttpDefaults,
    RunnerDefaults,
    DatabaseDefaults,
    CheckToggles,
    Defaults,
    load_settings_file,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "SiteDefaults",
    "HttpDefaults",
    "RunnerDefaults",
    "DatabaseDefaults",
    "CheckToggles",
    "Defaults",
    "load_settings_file",
    "get_defaults",
    "reset_defaults",
]
