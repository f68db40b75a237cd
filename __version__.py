# ============================================================================
# VERSION - JOOMLA HEALTH CHECKER
# ============================================================================
"""
Version information for the Joomla Health Checker.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch
__version__ = "1.0.3"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-12"

CODENAME = "Health Checker for Joomla"
