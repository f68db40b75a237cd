# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for site location, HTTP probes, runner
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the health checker.
These can be overridden via environment variables or the YAML settings file.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

import yaml


@dataclass(frozen=True)
class SiteDefaults:
    """
    Location of the Joomla site being checked.

    configuration.php is read from the site root unless an explicit
    path is given.
    """
    root: str = "/var/www/html"
    configuration_file: Optional[str] = None

    # PHP runtime snapshot source
    php_binary: str = "php"
    php_snapshot_file: Optional[str] = None

    @property
    def configuration_path(self) -> str:
        """Absolute path of configuration.php."""
        return self.configuration_file or os.path.join(self.root, "configuration.php")

    @classmethod
    def from_env(cls) -> "SiteDefaults":
        """Create from environment variables."""
        return cls(
            root=os.getenv("JOOMLA_ROOT", "/var/www/html"),
            configuration_file=os.getenv("JOOMLA_CONFIGURATION_FILE") or None,
            php_binary=os.getenv("PHP_BINARY", "php"),
            php_snapshot_file=os.getenv("PHP_SNAPSHOT_FILE") or None,
        )


@dataclass(frozen=True)
class HttpDefaults:
    """
    Defaults for outbound HTTP probes.

    Used by the PHP end-of-life lookup and the server clock check.
    """
    php_eol_api_url: str = "https://endoflife.date/api/php.json"
    php_eol_timeout: float = 10.0

    # (url, display name) pairs, tried in order
    time_sources: Tuple[Tuple[str, str], ...] = (
        ("https://www.google.com", "Google"),
        ("https://www.cloudflare.com", "Cloudflare"),
    )
    time_source_timeout: float = 5.0

    @classmethod
    def from_env(cls) -> "HttpDefaults":
        """Create from environment variables."""
        return cls(
            php_eol_api_url=os.getenv(
                "PHP_EOL_API_URL", "https://endoflife.date/api/php.json"
            ),
            php_eol_timeout=float(os.getenv("PHP_EOL_TIMEOUT", 10.0)),
            time_source_timeout=float(os.getenv("TIME_SOURCE_TIMEOUT", 5.0)),
        )


@dataclass(frozen=True)
class RunnerDefaults:
    """
    Defaults for the check runner.

    Controls parallelism and per-check timeouts.
    """
    max_parallel: int = 8
    check_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "RunnerDefaults":
        """Create from environment variables."""
        return cls(
            max_parallel=int(os.getenv("HEALTHCHECK_MAX_PARALLEL", 8)),
            check_timeout=float(os.getenv("HEALTHCHECK_TIMEOUT", 30.0)),
        )


@dataclass(frozen=True)
class DatabaseDefaults:
    """
    Database overrides.

    When url is empty the connection is built from configuration.php.
    """
    url: Optional[str] = None
    prefix: Optional[str] = None
    pool_min_size: int = 1
    pool_max_size: int = 4

    @classmethod
    def from_env(cls) -> "DatabaseDefaults":
        """Create from environment variables."""
        return cls(
            url=os.getenv("DATABASE_URL") or None,
            prefix=os.getenv("JOOMLA_DB_PREFIX") or None,
        )


@dataclass(frozen=True)
class CheckToggles:
    """
    Enable/disable switches for individual checks.

    Every check is enabled unless its slug is listed as disabled.
    """
    disabled: FrozenSet[str] = frozenset()

    def is_enabled(self, slug: str) -> bool:
        """Check if a check slug is enabled."""
        return slug not in self.disabled

    @classmethod
    def from_mapping(cls, checks: Dict[str, bool], extra_disabled=()) -> "CheckToggles":
        """Build from a {slug: enabled} mapping plus extra disabled slugs."""
        disabled = {slug for slug, enabled in (checks or {}).items() if not enabled}
        disabled.update(s.strip() for s in extra_disabled if s.strip())
        return cls(disabled=frozenset(disabled))

    @classmethod
    def from_env(cls, settings: Optional[Dict] = None) -> "CheckToggles":
        """Create from the settings file and HEALTHCHECKER_DISABLED_CHECKS."""
        env_disabled = os.getenv("HEALTHCHECKER_DISABLED_CHECKS", "").split(",")
        checks = (settings or {}).get("checks") or {}
        return cls.from_mapping(checks, env_disabled)


def load_settings_file(path: Optional[str]) -> Dict:
    """
    Load the optional YAML settings file.

    Returns an empty dict when no path is given. A missing file
    or a document that is not a mapping raises ValueError.
    """
    if not path:
        return {}

    if not os.path.isfile(path):
        raise ValueError(f"Settings file not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping: {path}")

    return data


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    site: SiteDefaults = field(default_factory=SiteDefaults)
    http: HttpDefaults = field(default_factory=HttpDefaults)
    runner: RunnerDefaults = field(default_factory=RunnerDefaults)
    database: DatabaseDefaults = field(default_factory=DatabaseDefaults)
    toggles: CheckToggles = field(default_factory=CheckToggles)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        settings = load_settings_file(os.getenv("HEALTHCHECKER_CONFIG"))
        return cls(
            site=SiteDefaults.from_env(),
            http=HttpDefaults.from_env(),
            runner=RunnerDefaults.from_env(),
            database=DatabaseDefaults.from_env(),
            toggles=CheckToggles.from_env(settings),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

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
