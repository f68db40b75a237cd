# ============================================================================
# HEALTH CHECK REGISTRY
# ============================================================================
# STATUS: Core - Check, category and provider registration
# PURPOSE: Register and discover health checks and their metadata
# ============================================================================
"""
Health Check Registry

Keeps three collections:
- checks: HealthCheckPlugin subclasses keyed by slug
- categories: HealthCategory keyed by slug (core categories pre-registered)
- providers: ProviderMetadata keyed by slug ("core" always present)

Checks are stored as classes. The runner instantiates each one with the
HealthCheckContext of the run, so concurrent runs never share state.

Usage:
    # Decorator registration
    @register_check(category="system")
    class MemoryLimitCheck(HealthCheckPlugin):
        slug = "system.memory_limit"
        ...

    # Lookup
    registry = get_registry()
    check_class = registry.get("system.memory_limit")
"""

import logging
from typing import Dict, List, Optional, Type

from health.core import (
    HealthCategory,
    HealthCheckPlugin,
    ProviderMetadata,
)
from __version__ import __version__

logger = logging.getLogger(__name__)


CORE_PROVIDER = ProviderMetadata(
    slug="core",
    name="Health Checker for Joomla",
    description="Built-in health checks",
    url="https://github.com/mySites-guru/HealthCheckerForJoomla",
    icon="fa-heartbeat",
    version=__version__,
)

CORE_CATEGORIES = (
    HealthCategory(slug="system", label="System", icon="fa-server", sort_order=10),
    HealthCategory(slug="database", label="Database", icon="fa-database", sort_order=20),
    HealthCategory(slug="security", label="Security", icon="fa-shield-alt", sort_order=30),
    HealthCategory(slug="users", label="Users", icon="fa-users", sort_order=40),
    HealthCategory(slug="extensions", label="Extensions", icon="fa-puzzle-piece", sort_order=50),
    HealthCategory(slug="performance", label="Performance", icon="fa-tachometer-alt", sort_order=60),
    HealthCategory(slug="seo", label="SEO", icon="fa-search", sort_order=70),
    HealthCategory(slug="content", label="Content", icon="fa-file-alt", sort_order=80),
)


class HealthCheckRegistry:
    """
    Registry for health checks, categories and providers.

    A fresh registry already holds the core provider and core categories.
    """

    def __init__(self, with_core: bool = True):
        self._checks: Dict[str, Type[HealthCheckPlugin]] = {}
        self._categories: Dict[str, HealthCategory] = {}
        self._providers: Dict[str, ProviderMetadata] = {}

        if with_core:
            self.register_provider(CORE_PROVIDER)
            for category in CORE_CATEGORIES:
                self.register_category(category)

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def register(self, check_class: Type[HealthCheckPlugin]) -> None:
        """
        Register a health check class.

        Raises:
            ValueError: If the class has no slug or the slug has no category part
        """
        slug = check_class.slug
        if not slug or "." not in slug:
            raise ValueError(
                f"{check_class.__name__} needs a slug of the form '<category>.<name>'"
            )

        if slug in self._checks:
            logger.warning(f"Overwriting health check: {slug}")

        self._checks[slug] = check_class
        logger.debug(
            f"Registered health check: {slug} "
            f"(category={check_class.category}, provider={check_class.provider})"
        )

    def get(self, slug: str) -> Optional[Type[HealthCheckPlugin]]:
        """Get health check class by slug."""
        return self._checks.get(slug)

    def get_all(self) -> List[Type[HealthCheckPlugin]]:
        """Get all registered checks in registration order."""
        return list(self._checks.values())

    def get_checks_by_category(self, category: str) -> List[Type[HealthCheckPlugin]]:
        """Get checks for a specific category."""
        return [c for c in self._checks.values() if c.category == category]

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def register_category(self, category: HealthCategory) -> None:
        self._categories[category.slug] = category

    def get_category(self, slug: str) -> Optional[HealthCategory]:
        return self._categories.get(slug)

    def get_categories(self) -> List[HealthCategory]:
        """All categories ordered by sort_order."""
        return sorted(self._categories.values(), key=lambda c: c.sort_order)

    def category_sort_order(self, slug: str) -> int:
        """Sort order of a category; unknown categories sort last."""
        category = self._categories.get(slug)
        return category.sort_order if category else 999

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    def register_provider(self, provider: ProviderMetadata) -> None:
        self._providers[provider.slug] = provider

    def get_providers(self) -> List[ProviderMetadata]:
        """All providers in registration order (core first)."""
        return list(self._providers.values())

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, slug: str) -> bool:
        return slug in self._checks


# ============================================================================
# GLOBAL REGISTRY & DECORATOR
# ============================================================================

_registry: Optional[HealthCheckRegistry] = None


def get_registry() -> HealthCheckRegistry:
    """Get the global health check registry."""
    global _registry
    if _registry is None:
        _registry = HealthCheckRegistry()
    return _registry


def register_check(
    category: str = None,
    provider: str = None,
    registry: Optional[HealthCheckRegistry] = None,
):
    """
    Decorator to register a health check class.

    Args:
        category: Override category slug
        provider: Override provider slug
        registry: Target registry (defaults to the global one)

    Example:
        @register_check(category="security")
        class MailerSecurityCheck(HealthCheckPlugin):
            slug = "security.mailer_security"

            def perform_check(self) -> HealthCheckResult:
                ...
    """
    def decorator(cls: Type[HealthCheckPlugin]) -> Type[HealthCheckPlugin]:
        if category is not None:
            cls.category = category

        if provider is not None:
            cls.provider = provider

        target = registry if registry is not None else get_registry()
        target.register(cls)

        return cls

    return decorator


def register_category(category: HealthCategory) -> HealthCategory:
    """Register a category on the global registry."""
    get_registry().register_category(category)
    return category


def register_provider(provider: ProviderMetadata) -> ProviderMetadata:
    """Register a provider on the global registry."""
    get_registry().register_provider(provider)
    return provider


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckRegistry",
    "CORE_PROVIDER",
    "CORE_CATEGORIES",
    "get_registry",
    "register_check",
    "register_category",
    "register_provider",
]
