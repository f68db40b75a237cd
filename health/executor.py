# ============================================================================
# HEALTH CHECK RUNNER
# ============================================================================
# STATUS: Core - Parallel health check execution
# PURPOSE: Execute health checks with timeouts and build the report
# ============================================================================
"""
Health Check Runner

Executes health checks with:
- Parallel execution in a thread pool (checks are synchronous)
- Per-check timeouts (a timed-out check is reported as a Warning)
- Result ordering: critical first, then by category sort order
- Check toggles (disabled slugs are never instantiated)

Execution Strategy:
1. Collect enabled check classes from the registry
2. Instantiate each with the run's HealthCheckContext
3. Run check.run() in the thread pool, bounded by a semaphore
4. Sort results and wrap them in a HealthReport
"""

import asyncio
import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Type

from core.config import CheckToggles
from core.logging import log_checkpoint, log_context
from health.core import (
    HealthCategory,
    HealthCheckContext,
    HealthCheckPlugin,
    HealthCheckResult,
    HealthStatus,
    ProviderMetadata,
)
from health.registry import HealthCheckRegistry, get_registry

logger = logging.getLogger(__name__)


def _release_slot(loop: asyncio.AbstractEventLoop, slot: asyncio.Semaphore) -> None:
    """Hand a concurrency slot back to the loop from a pool thread."""
    if loop.is_closed():
        # The run ended while this check was still hung
        return
    loop.call_soon_threadsafe(slot.release)


@dataclass
class HealthReport:
    """Outcome of a full run."""
    results: List[HealthCheckResult]
    last_run: datetime
    categories: List[HealthCategory] = field(default_factory=list)
    providers: List[ProviderMetadata] = field(default_factory=list)
    run_id: Optional[str] = None

    def _count(self, status: HealthStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def critical_count(self) -> int:
        return self._count(HealthStatus.CRITICAL)

    @property
    def warning_count(self) -> int:
        return self._count(HealthStatus.WARNING)

    @property
    def good_count(self) -> int:
        return self._count(HealthStatus.GOOD)

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def status(self) -> HealthStatus:
        """Overall status (worst wins)."""
        return HealthStatus.aggregate([r.status for r in self.results])

    @property
    def last_run_iso(self) -> str:
        return self.last_run.isoformat(timespec="seconds")

    def by_category(self) -> Dict[str, List[HealthCheckResult]]:
        """Results grouped by category, in category order; unknown categories last."""
        grouped: Dict[str, List[HealthCheckResult]] = {}
        for result in self.results:
            grouped.setdefault(result.category, []).append(result)

        ordered: Dict[str, List[HealthCheckResult]] = {}
        for category in self.categories:
            if category.slug in grouped:
                ordered[category.slug] = grouped[category.slug]
        for slug, results in grouped.items():
            if slug not in ordered:
                ordered[slug] = results
        return ordered

    def by_status(self) -> Dict[str, List[HealthCheckResult]]:
        grouped: Dict[str, List[HealthCheckResult]] = {
            HealthStatus.CRITICAL.value: [],
            HealthStatus.WARNING.value: [],
            HealthStatus.GOOD.value: [],
        }
        for result in self.results:
            grouped[result.status.value].append(result)
        return grouped

    def summary(self) -> Dict[str, int]:
        return {
            "critical": self.critical_count,
            "warning": self.warning_count,
            "good": self.good_count,
            "total": self.total_count,
        }

    def stats(self) -> Dict[str, Any]:
        return {**self.summary(), "lastRun": self.last_run_iso}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response and export."""
        return {
            "lastRun": self.last_run_iso,
            "summary": self.summary(),
            "categories": [c.to_dict() for c in self.categories],
            "providers": [p.to_dict() for p in self.providers],
            "results": [r.to_dict() for r in self.results],
        }


class HealthCheckRunner:
    """
    Runs registered health checks against one site.

    Checks run in parallel in a thread pool; each has its own timeout.
    """

    def __init__(
        self,
        context: HealthCheckContext,
        registry: Optional[HealthCheckRegistry] = None,
        toggles: Optional[CheckToggles] = None,
        max_parallel: int = 8,
        check_timeout: float = 30.0,
    ):
        """
        Initialize runner.

        Args:
            context: Collaborators handed to every check
            registry: Health check registry (uses global if None)
            toggles: Enabled/disabled switches (all enabled if None)
            max_parallel: Max concurrent checks
            check_timeout: Per-check timeout in seconds
        """
        self.context = context
        self.registry = registry if registry is not None else get_registry()
        self.toggles = toggles or CheckToggles()
        self.max_parallel = max_parallel
        self.check_timeout = check_timeout
        self._thread_pool = ThreadPoolExecutor(
            max_workers=max_parallel,
            thread_name_prefix="healthcheck",
        )

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def enabled_checks(self) -> List[Type[HealthCheckPlugin]]:
        """Registered check classes that are not disabled."""
        return [c for c in self.registry.get_all() if self.toggles.is_enabled(c.slug)]

    def metadata(self) -> Dict[str, Any]:
        """
        Categories, providers and the list of available checks.

        Raises:
            RuntimeError: If no checks are available
        """
        checks = self.enabled_checks()
        if not checks:
            raise RuntimeError("No health checks are available.")

        return {
            "categories": [c.to_dict() for c in self.registry.get_categories()],
            "providers": [p.to_dict() for p in self.registry.get_providers()],
            "checks": [
                {
                    "slug": c.slug,
                    "category": c.category,
                    "title": c.title or c.slug,
                }
                for c in checks
            ],
        }

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def run_all(self) -> HealthReport:
        """Execute all enabled checks and build the report."""
        run_id = uuid.uuid4().hex[:12]
        last_run = self.context.now()
        checks = self.enabled_checks()

        with log_context(run_id=run_id):
            log_checkpoint("health_run_started", {"checks": len(checks)}, logger)
            start_time = time.monotonic()

            results = await self._execute_many(checks, run_id)
            results = self.sort_results(results)

            report = HealthReport(
                results=results,
                last_run=last_run,
                categories=self.registry.get_categories(),
                providers=self.registry.get_providers(),
                run_id=run_id,
            )

            log_checkpoint(
                "health_run_completed",
                {
                    **report.summary(),
                    "duration_ms": round((time.monotonic() - start_time) * 1000, 1),
                },
                logger,
            )

        return report

    async def run_single(self, slug: str) -> Optional[HealthCheckResult]:
        """Execute one check by slug; None when unknown or disabled."""
        check_class = self.registry.get(slug)
        if check_class is None or not self.toggles.is_enabled(slug):
            return None

        return await self._execute_check(check_class, run_id=None)

    async def run_category(self, category: str) -> Dict[str, HealthCheckResult]:
        """Execute the enabled checks of one category, keyed by slug."""
        checks = [
            c for c in self.registry.get_checks_by_category(category)
            if self.toggles.is_enabled(c.slug)
        ]
        results = await self._execute_many(checks, run_id=None)
        return {r.slug: r for r in self.sort_results(results)}

    async def stats(self) -> Dict[str, Any]:
        """Run everything and return only the counts and timestamp."""
        report = await self.run_all()
        return report.stats()

    def sort_results(self, results: List[HealthCheckResult]) -> List[HealthCheckResult]:
        """Order by status (critical first), then category sort order."""
        return sorted(
            results,
            key=lambda r: (
                r.status.sort_order,
                self.registry.category_sort_order(r.category),
            ),
        )

    async def _execute_many(
        self,
        checks: List[Type[HealthCheckPlugin]],
        run_id: Optional[str],
    ) -> List[HealthCheckResult]:
        """Execute checks in parallel, preserving input order."""
        if not checks:
            return []

        # One slot per pool worker. A slot is handed back when the worker
        # thread finishes, not when the check times out, so a queued check
        # never spends its own timeout waiting behind a hung one.
        semaphore = asyncio.Semaphore(self.max_parallel)

        async def run_with_semaphore(check_class: Type[HealthCheckPlugin]):
            await semaphore.acquire()
            return await self._execute_check(check_class, run_id, slot=semaphore)

        return list(await asyncio.gather(*(run_with_semaphore(c) for c in checks)))

    async def _execute_check(
        self,
        check_class: Type[HealthCheckPlugin],
        run_id: Optional[str],
        slot: Optional[asyncio.Semaphore] = None,
    ) -> HealthCheckResult:
        """
        Execute a single check with timeout.

        When a slot is given it is released once the worker thread is done.
        """
        check = check_class(self.context)
        loop = asyncio.get_running_loop()
        start_time = time.monotonic()

        try:
            future = self._thread_pool.submit(self._run_in_thread, check, run_id)
        except RuntimeError:
            # Pool already shut down
            if slot is not None:
                slot.release()
            raise

        if slot is not None:
            future.add_done_callback(lambda _: _release_slot(loop, slot))

        try:
            result = await asyncio.wait_for(
                asyncio.wrap_future(future),
                timeout=self.check_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Health check {check.slug} timed out after {self.check_timeout}s")
            result = check.warning(f"Check timed out after {self.check_timeout:g} seconds.")

        result.duration_ms = (time.monotonic() - start_time) * 1000

        logger.debug(
            f"Health check {check.slug}: {result.status.value} "
            f"({result.duration_ms:.1f}ms)"
        )
        return result

    @staticmethod
    def _run_in_thread(check: HealthCheckPlugin, run_id: Optional[str]) -> HealthCheckResult:
        # Log context is thread-local, so it is entered in the worker thread
        with log_context(
            run_id=run_id,
            check_slug=check.slug,
            category=check.category,
            provider=check.provider,
        ):
            return check.run()

    def close(self) -> None:
        """Shut down the thread pool."""
        self._thread_pool.shutdown(wait=False)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckRunner",
    "HealthReport",
]
