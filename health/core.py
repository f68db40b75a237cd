# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# STATUS: Core - Base classes for health checks
# PURPOSE: Check plugin interface, result, category and provider types
# ============================================================================
"""
Health Check Core Types

Defines the check interface and the value types shared by the runner,
the API and the CLI.

Status Hierarchy (worst wins):
- critical: Something is broken or dangerous (sort order 1)
- warning: Should be looked at (sort order 2)
- good: Nothing to do (sort order 3)

Every check is a HealthCheckPlugin subclass with a slug of the form
"<category>.<name>". perform_check() does the work; run() wraps it so
that an exception becomes a Warning rather than a failed report.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import httpx

from core.config import HttpDefaults
from core.models import PhpRuntime, SiteConfiguration

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health check status values."""
    CRITICAL = "critical"
    WARNING = "warning"
    GOOD = "good"

    @property
    def sort_order(self) -> int:
        """Display order, most severe first."""
        return {
            HealthStatus.CRITICAL: 1,
            HealthStatus.WARNING: 2,
            HealthStatus.GOOD: 3,
        }[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def badge_class(self) -> str:
        return {
            HealthStatus.CRITICAL: "bg-danger",
            HealthStatus.WARNING: "bg-warning text-dark",
            HealthStatus.GOOD: "bg-success",
        }[self]

    @classmethod
    def aggregate(cls, statuses: List["HealthStatus"]) -> "HealthStatus":
        """Aggregate multiple statuses (worst wins)."""
        if not statuses:
            return cls.GOOD
        return min(statuses, key=lambda s: s.sort_order)


@dataclass(frozen=True)
class HealthCategory:
    """A group of checks shown together in reports."""
    slug: str
    label: str
    icon: str
    sort_order: int = 50
    logo_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slug": self.slug,
            "label": self.label,
            "icon": self.icon,
            "sortOrder": self.sort_order,
            "logoUrl": self.logo_url,
        }


@dataclass(frozen=True)
class ProviderMetadata:
    """Who supplies a set of checks (core or an integration)."""
    slug: str
    name: str
    description: str = ""
    url: Optional[str] = None
    icon: Optional[str] = None
    logo_url: Optional[str] = None
    version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slug": self.slug,
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "icon": self.icon,
            "logoUrl": self.logo_url,
            "version": self.version,
        }


@dataclass
class HealthCheckResult:
    """Result from a single health check."""
    status: HealthStatus
    title: str
    description: str
    slug: str
    category: str
    provider: str = "core"
    docs_url: Optional[str] = None
    action_url: Optional[str] = None
    duration_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {
            "status": self.status.value,
            "title": self.title,
            "description": self.description,
            "slug": self.slug,
            "category": self.category,
            "provider": self.provider,
            "docsUrl": self.docs_url,
            "actionUrl": self.action_url,
            "durationMs": round(self.duration_ms, 2),
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class HealthCheckContext:
    """
    Collaborators handed to every check.

    site, database and runtime are optional; checks that need one call
    require_site(), require_database() or require_runtime(), which raise
    RuntimeError (reported as a Warning) when it is missing.
    """
    site_root: str = "."
    site: Optional[SiteConfiguration] = None
    database: Optional[Any] = None
    runtime: Optional[PhpRuntime] = None
    http: HttpDefaults = field(default_factory=HttpDefaults)
    http_transport: Optional[httpx.BaseTransport] = None
    clock: Callable[[], datetime] = _utcnow

    def now(self) -> datetime:
        """Current time as an aware UTC datetime."""
        return self.clock()


class HealthCheckPlugin(ABC):
    """
    Base class for health checks.

    Subclass, set slug and title, and implement perform_check().
    Use the @register_check decorator to make the check discoverable.

    Attributes:
        slug: Unique "<category>.<name>" identifier
        category: Category slug (set by @register_check)
        provider: Provider slug
        title: Human-readable name, defaults to the slug
        docs_url: Optional documentation link
        action_url: Optional link to where the problem is fixed

    Example:
        @register_check(category="system")
        class MemoryLimitCheck(HealthCheckPlugin):
            slug = "system.memory_limit"
            title = "PHP Memory Limit"

            def perform_check(self) -> HealthCheckResult:
                limit = self.require_runtime().ini_get("memory_limit")
                ...
                return self.good(f"Memory limit ({limit}) meets requirements.")
    """

    slug: str = ""
    category: str = "system"
    provider: str = "core"
    title: Optional[str] = None
    docs_url: Optional[str] = None
    action_url: Optional[str] = None

    def __init__(self, context: Optional[HealthCheckContext] = None):
        self.context = context or HealthCheckContext()

    def get_title(self) -> str:
        return self.title or self.slug

    def get_action_url(self, status: HealthStatus) -> Optional[str]:
        """Link shown next to the result; may depend on the status."""
        return self.action_url

    @abstractmethod
    def perform_check(self) -> HealthCheckResult:
        """
        Execute the check.

        Returns:
            HealthCheckResult built with good(), warning() or critical()
        """
        pass

    def run(self) -> HealthCheckResult:
        """Run the check; any exception is reported as a Warning."""
        try:
            return self.perform_check()
        except Exception as e:
            logger.warning(f"Health check {self.slug} raised {type(e).__name__}: {e}")
            return self.warning(f"Check error: {e}")

    # ------------------------------------------------------------------
    # Result helpers
    # ------------------------------------------------------------------

    def _result(self, status: HealthStatus, description: str) -> HealthCheckResult:
        return HealthCheckResult(
            status=status,
            title=self.get_title(),
            description=description,
            slug=self.slug,
            category=self.category,
            provider=self.provider,
            docs_url=self.docs_url,
            action_url=self.get_action_url(status),
        )

    def good(self, description: str) -> HealthCheckResult:
        return self._result(HealthStatus.GOOD, description)

    def warning(self, description: str) -> HealthCheckResult:
        return self._result(HealthStatus.WARNING, description)

    def critical(self, description: str) -> HealthCheckResult:
        return self._result(HealthStatus.CRITICAL, description)

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    def require_database(self):
        if self.context.database is None:
            raise RuntimeError(
                f"Health check {self.slug} requires database access "
                f"but no database was provided."
            )
        return self.context.database

    def require_site(self) -> SiteConfiguration:
        if self.context.site is None:
            raise RuntimeError(
                f"Health check {self.slug} requires the site configuration "
                f"but none was provided."
            )
        return self.context.site

    def require_runtime(self) -> PhpRuntime:
        if self.context.runtime is None:
            raise RuntimeError(
                f"Health check {self.slug} requires a PHP runtime snapshot "
                f"but none was provided."
            )
        return self.context.runtime

    def http_client(self, timeout: float) -> httpx.Client:
        """Synchronous HTTP client honouring the context transport."""
        return httpx.Client(
            timeout=timeout,
            transport=self.context.http_transport,
            headers={"User-Agent": "Joomla-HealthChecker"},
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.slug}>"


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthStatus",
    "HealthCategory",
    "ProviderMetadata",
    "HealthCheckResult",
    "HealthCheckContext",
    "HealthCheckPlugin",
]
