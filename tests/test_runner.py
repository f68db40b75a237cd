# ============================================================================
# HEALTH CHECK RUNNER TESTS
# ============================================================================
# STATUS: Tests - Parallel execution, timeouts and report building
# PURPOSE: Verify ordering, toggles, timeouts and the HealthReport shape
# ============================================================================
"""
Runner Tests

Covers:
1. Results sorted by status, then category sort order
2. Disabled checks are skipped
3. A slow check becomes a Warning after the timeout
4. run_single / run_category / metadata / stats

Run with:
    pytest tests/test_runner.py -v
"""

import asyncio
import threading

import pytest

import health.checks  # noqa: F401
from core.config import CheckToggles
from health.core import HealthCategory, HealthCheckContext, HealthCheckPlugin, HealthStatus
from health.executor import HealthCheckRunner
from health.registry import HealthCheckRegistry, register_check


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def registry():
    """Fresh registry with three checks of different status and category."""
    registry = HealthCheckRegistry()

    @register_check(category="system", registry=registry)
    class SystemGood(HealthCheckPlugin):
        slug = "system.good"
        title = "System Good"

        def perform_check(self):
            return self.good("fine")

    @register_check(category="security", registry=registry)
    class SecurityWarning(HealthCheckPlugin):
        slug = "security.warning"

        def perform_check(self):
            return self.warning("look at this")

    @register_check(category="security", registry=registry)
    class SecurityCritical(HealthCheckPlugin):
        slug = "security.critical"

        def perform_check(self):
            return self.critical("broken")

    @register_check(category="system", registry=registry)
    class SystemCritical(HealthCheckPlugin):
        slug = "system.critical"

        def perform_check(self):
            return self.critical("also broken")

    return registry


@pytest.fixture
def runner(registry, fixed_now):
    runner = HealthCheckRunner(
        HealthCheckContext(clock=lambda: fixed_now),
        registry=registry,
        check_timeout=5.0,
    )
    yield runner
    runner.close()


# ============================================================================
# TESTS
# ============================================================================

class TestRunAll:

    def test_sorted_by_status_then_category(self, runner):
        report = asyncio.run(runner.run_all())

        assert [r.slug for r in report.results] == [
            "system.critical",    # critical, system (10)
            "security.critical",  # critical, security (30)
            "security.warning",
            "system.good",
        ]

    def test_counts_and_status(self, runner, fixed_now):
        report = asyncio.run(runner.run_all())

        assert report.summary() == {"critical": 2, "warning": 1, "good": 1, "total": 4}
        assert report.status == HealthStatus.CRITICAL
        assert report.last_run == fixed_now
        assert report.run_id

    def test_grouping(self, runner):
        report = asyncio.run(runner.run_all())

        assert list(report.by_category()) == ["system", "security"]
        by_status = report.by_status()
        assert [r.slug for r in by_status["warning"]] == ["security.warning"]

    def test_to_dict(self, runner):
        data = asyncio.run(runner.run_all()).to_dict()

        assert data["lastRun"] == "2026-03-15T12:00:00+00:00"
        assert data["summary"]["total"] == 4
        assert data["providers"][0]["slug"] == "core"
        assert data["results"][0]["status"] == "critical"
        assert "durationMs" in data["results"][0]

    def test_unknown_category_sorts_last(self, registry, fixed_now):
        @register_check(category="custom", registry=registry)
        class CustomCritical(HealthCheckPlugin):
            slug = "custom.critical"

            def perform_check(self):
                return self.critical("custom")

        runner = HealthCheckRunner(HealthCheckContext(clock=lambda: fixed_now), registry=registry)
        try:
            report = asyncio.run(runner.run_all())
        finally:
            runner.close()

        critical = [r.slug for r in report.results if r.status == HealthStatus.CRITICAL]
        assert critical[-1] == "custom.critical"
        assert list(report.by_category())[-1] == "custom"

    def test_registered_category_order(self, registry, fixed_now):
        registry.register_category(HealthCategory("first", "First", "fa-star", sort_order=1))

        @register_check(category="first", registry=registry)
        class FirstCritical(HealthCheckPlugin):
            slug = "first.critical"

            def perform_check(self):
                return self.critical("first")

        runner = HealthCheckRunner(HealthCheckContext(clock=lambda: fixed_now), registry=registry)
        try:
            report = asyncio.run(runner.run_all())
        finally:
            runner.close()

        assert report.results[0].slug == "first.critical"


class TestToggles:

    def test_disabled_checks_skipped(self, registry, fixed_now):
        runner = HealthCheckRunner(
            HealthCheckContext(clock=lambda: fixed_now),
            registry=registry,
            toggles=CheckToggles(disabled=frozenset({"security.critical"})),
        )
        try:
            report = asyncio.run(runner.run_all())
            single = asyncio.run(runner.run_single("security.critical"))
        finally:
            runner.close()

        assert "security.critical" not in [r.slug for r in report.results]
        assert single is None


class TestTimeout:

    def test_slow_check_becomes_warning(self, fixed_now):
        registry = HealthCheckRegistry()
        release = threading.Event()

        @register_check(category="system", registry=registry)
        class SlowCheck(HealthCheckPlugin):
            slug = "system.slow"

            def perform_check(self):
                release.wait(5)
                return self.good("finally")

        runner = HealthCheckRunner(
            HealthCheckContext(clock=lambda: fixed_now),
            registry=registry,
            check_timeout=0.05,
        )
        try:
            result = asyncio.run(runner.run_single("system.slow"))
        finally:
            release.set()
            runner.close()

        assert result.status == HealthStatus.WARNING
        assert result.description == "Check timed out after 0.05 seconds."

    def test_queued_check_not_charged_for_hung_one(self, fixed_now):
        registry = HealthCheckRegistry()
        release = threading.Event()

        @register_check(category="system", registry=registry)
        class HungCheck(HealthCheckPlugin):
            slug = "system.hung"

            def perform_check(self):
                release.wait(0.6)
                return self.good("finally")

        @register_check(category="system", registry=registry)
        class FastCheck(HealthCheckPlugin):
            slug = "system.fast"

            def perform_check(self):
                return self.good("instant")

        runner = HealthCheckRunner(
            HealthCheckContext(clock=lambda: fixed_now),
            registry=registry,
            max_parallel=1,
            check_timeout=0.2,
        )
        try:
            report = asyncio.run(runner.run_all())
        finally:
            release.set()
            runner.close()

        results = {r.slug: r for r in report.results}
        assert results["system.hung"].description == "Check timed out after 0.2 seconds."
        assert results["system.fast"].status == HealthStatus.GOOD
        assert results["system.fast"].description == "instant"


class TestOtherOperations:

    def test_run_single(self, runner):
        result = asyncio.run(runner.run_single("security.warning"))

        assert result.status == HealthStatus.WARNING
        assert result.duration_ms >= 0

    def test_run_single_unknown(self, runner):
        assert asyncio.run(runner.run_single("system.nope")) is None

    def test_run_category(self, runner):
        results = asyncio.run(runner.run_category("security"))

        assert list(results) == ["security.critical", "security.warning"]
        assert results["security.warning"].description == "look at this"

    def test_run_category_unknown(self, runner):
        assert asyncio.run(runner.run_category("nothing")) == {}

    def test_stats(self, runner):
        stats = asyncio.run(runner.stats())

        assert stats["critical"] == 2
        assert stats["lastRun"] == "2026-03-15T12:00:00+00:00"

    def test_metadata(self, runner):
        metadata = runner.metadata()

        assert len(metadata["checks"]) == 4
        assert metadata["checks"][0] == {
            "slug": "system.good",
            "category": "system",
            "title": "System Good",
        }
        assert metadata["categories"][0]["slug"] == "system"

    def test_metadata_without_checks(self, fixed_now):
        runner = HealthCheckRunner(HealthCheckContext(), registry=HealthCheckRegistry())
        try:
            assert len(runner.registry) == 0
            with pytest.raises(RuntimeError, match="No health checks"):
                runner.metadata()
        finally:
            runner.close()
