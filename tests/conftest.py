# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# STATUS: Tests - Fixtures shared by check, runner and API tests
# PURPOSE: Build PHP runtimes, site configurations and check contexts
# ============================================================================
"""
Shared fixtures.

Checks are exercised with hand-built collaborators:
- make_runtime(**fields):  PhpRuntime with sane defaults
- make_context(**fields):  HealthCheckContext with a fixed clock
- mock_db:                 MagicMock standing in for JoomlaDatabase
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from core.config import reset_defaults
from core.models import PhpRuntime, SiteConfiguration
from health.core import HealthCheckContext

FIXED_NOW = datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def make_runtime():
    """Factory for PhpRuntime snapshots of a healthy PHP 8.3 install."""
    def _make(**overrides) -> PhpRuntime:
        fields = {
            "version": "8.3.4",
            "sapi": "fpm-fcgi",
            "extensions": ["Core", "json", "mbstring", "openssl", "pdo_mysql"],
            "ini": {},
            "functions": {"mail": True, "exif_read_data": True},
        }
        fields.update(overrides)
        return PhpRuntime(**fields)

    return _make


@pytest.fixture
def mock_db():
    """Database stand-in; table_exists() is True unless a test says otherwise."""
    db = MagicMock()
    db.table_exists.return_value = True
    return db


@pytest.fixture
def make_context(make_runtime, tmp_path):
    """Factory for check contexts rooted in a temporary directory."""
    def _make(**overrides) -> HealthCheckContext:
        fields = {
            "site_root": str(tmp_path),
            "site": SiteConfiguration(),
            "runtime": make_runtime(),
            "clock": lambda: FIXED_NOW,
        }
        fields.update(overrides)
        return HealthCheckContext(**fields)

    return _make


@pytest.fixture(autouse=True)
def clean_defaults():
    """Global defaults are rebuilt from the environment for every test."""
    reset_defaults()
    yield
    reset_defaults()
