# ============================================================================
# HEALTH ROUTER TESTS
# ============================================================================
# STATUS: Tests - FastAPI endpoints
# PURPOSE: Verify status codes, payload shape and report exports
# ============================================================================
"""
Health Router Tests

The router runs against a fresh registry with a handful of stub checks,
wired in through FastAPI dependency overrides.

Run with:
    pytest tests/test_router.py -v
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from health.core import HealthCheckContext, HealthCheckPlugin
from health.executor import HealthCheckRunner
from health.registry import HealthCheckRegistry, register_check
from health.router import get_runner, health_router, set_runner


# ============================================================================
# FIXTURES
# ============================================================================

def _registry(*statuses):
    """Registry with one system check per requested status."""
    registry = HealthCheckRegistry()
    for index, status in enumerate(statuses):
        def perform_check(self, status=status):
            return getattr(self, status)(f"{status} result")

        check_class = type(
            f"Stub{index}",
            (HealthCheckPlugin,),
            {"slug": f"system.stub_{index}", "title": f"Stub {index}", "perform_check": perform_check},
        )
        register_check(category="system", registry=registry)(check_class)
    return registry


@pytest.fixture
def make_client(fixed_now):
    runners = []

    def _make(*statuses):
        runner = HealthCheckRunner(
            HealthCheckContext(clock=lambda: fixed_now),
            registry=_registry(*statuses),
        )
        runners.append(runner)

        app = FastAPI()
        app.include_router(health_router)
        app.dependency_overrides[get_runner] = lambda: runner
        return TestClient(app)

    yield _make

    for runner in runners:
        runner.close()


# ============================================================================
# TESTS
# ============================================================================

class TestLiveness:

    def test_livez(self, make_client):
        response = make_client("good").get("/livez")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestFullReport:

    @pytest.mark.parametrize("statuses,code,overall", [
        (("good", "good"), 200, "good"),
        (("good", "warning"), 206, "warning"),
        (("warning", "critical"), 503, "critical"),
    ])
    def test_status_codes(self, make_client, statuses, code, overall):
        response = make_client(*statuses).get("/health")

        assert response.status_code == code
        assert response.json()["status"] == overall

    def test_payload(self, make_client):
        body = make_client("good", "critical").get("/health").json()

        assert body["lastRun"] == "2026-03-15T12:00:00+00:00"
        assert body["summary"] == {"critical": 1, "warning": 0, "good": 1, "total": 2}
        assert body["results"][0]["slug"] == "system.stub_1"
        assert body["results"][0]["status"] == "critical"
        assert body["categories"][0]["sortOrder"] == 10

    def test_stats(self, make_client):
        body = make_client("good", "warning").get("/health/stats").json()
        assert body == {
            "critical": 0,
            "warning": 1,
            "good": 1,
            "total": 2,
            "lastRun": "2026-03-15T12:00:00+00:00",
        }


class TestMetadata:

    def test_metadata(self, make_client):
        body = make_client("good").get("/health/metadata").json()

        assert body["checks"] == [{"slug": "system.stub_0", "category": "system", "title": "Stub 0"}]
        assert body["providers"][0]["slug"] == "core"

    def test_no_checks(self, make_client):
        response = make_client().get("/health/metadata")

        assert response.status_code == 503
        assert response.json() == {"error": "No health checks are available."}


class TestSingleAndCategory:

    def test_single(self, make_client):
        response = make_client("warning").get("/health/check/system.stub_0")

        assert response.status_code == 206
        assert response.json()["description"] == "warning result"

    def test_single_not_found(self, make_client):
        response = make_client("good").get("/health/check/system.nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Health check not found: system.nope"}

    def test_category(self, make_client):
        body = make_client("good", "critical").get("/health/category/system").json()

        assert body["category"] == "system"
        assert list(body["results"]) == ["system.stub_1", "system.stub_0"]
        assert body["results"]["system.stub_0"]["status"] == "good"


class TestExports:

    def test_json_export(self, make_client):
        response = make_client("good").get("/health/export.json")

        assert response.status_code == 200
        assert response.headers["content-disposition"] == (
            'attachment; filename="health-report-2026-03-15.json"'
        )
        assert response.json()["summary"]["total"] == 1

    def test_html_export(self, make_client):
        response = make_client("good", "critical").get("/health/export.html")

        assert response.status_code == 200
        assert response.headers["content-disposition"] == (
            'attachment; filename="health-report-2026-03-15.html"'
        )
        assert "text/html" in response.headers["content-type"]
        assert "Health Report" in response.text
        assert "critical result" in response.text
        assert "1 Critical" in response.text


class TestRunnerInjection:

    def test_uninitialized_runner(self):
        set_runner(None)
        app = FastAPI()
        app.include_router(health_router)

        response = TestClient(app).get("/health")

        assert response.status_code == 500

    def test_set_runner(self, fixed_now):
        runner = HealthCheckRunner(HealthCheckContext(clock=lambda: fixed_now), registry=_registry("good"))
        set_runner(runner)
        try:
            app = FastAPI()
            app.include_router(health_router)
            assert TestClient(app).get("/health").status_code == 200
        finally:
            set_runner(None)
            runner.close()
