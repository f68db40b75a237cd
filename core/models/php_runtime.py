# ============================================================================
# PHP RUNTIME SNAPSHOT MODEL
# ============================================================================
# STATUS: Domain model - PHP interpreter introspection
# PURPOSE: Point-in-time view of the PHP runtime that serves the site
# ============================================================================
"""
PHP Runtime Snapshot

A snapshot of the PHP interpreter behind a Joomla site: version, SAPI,
loaded extensions, ini values and a handful of runtime-only facts
(OPcache memory, realpath cache usage, session save path).

Snapshots are collected by infrastructure.php_runtime, either by running
the PHP binary or by loading JSON produced under the web SAPI.

Example:
    runtime = PhpRuntime(version="8.3.4", sapi="fpm-fcgi",
                         extensions=["Core", "json", "Zend OPcache"],
                         ini={"memory_limit": "256M"})
    runtime.ini_get("memory_limit")      # "256M"
    runtime.extension_loaded("JSON")     # True
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class OpcacheMemoryUsage(BaseModel):
    """opcache_get_status()['memory_usage'] subset."""
    used_memory: Optional[int] = None
    free_memory: Optional[int] = None
    wasted_memory: Optional[int] = None


class OpcacheStatus(BaseModel):
    """opcache_get_status(false) subset."""
    opcache_enabled: bool = False
    memory_usage: Optional[OpcacheMemoryUsage] = None


class PhpRuntime(BaseModel):
    """
    Snapshot of a PHP runtime.

    ini values keep PHP's string representation. A key missing from
    `ini` corresponds to ini_get() returning false.
    """

    version: str = Field(..., description="PHP_VERSION")
    sapi: str = Field(default="cli", description="PHP_SAPI")
    extensions: List[str] = Field(default_factory=list)
    ini: Dict[str, str] = Field(default_factory=dict)
    functions: Dict[str, bool] = Field(
        default_factory=dict,
        description="function_exists() results for probed functions",
    )

    apache_modules: Optional[List[str]] = Field(
        default=None,
        description="apache_get_modules(), None when not running under Apache",
    )
    curl_version: Optional[str] = None
    openssl_version_text: Optional[str] = None
    opcache_status: Optional[OpcacheStatus] = None
    realpath_cache_used: Optional[int] = None
    session_save_path: Optional[str] = None
    sys_temp_dir: Optional[str] = None
    timezone: str = "UTC"

    def ini_get(self, name: str) -> Optional[str]:
        """Return the ini value, or None where PHP would return false."""
        return self.ini.get(name)

    def extension_loaded(self, name: str) -> bool:
        """Case-insensitive extension lookup, like PHP's extension_loaded()."""
        wanted = name.lower()
        return any(ext.lower() == wanted for ext in self.extensions)

    def function_exists(self, name: str) -> bool:
        """Whether a probed function exists and is not disabled."""
        return bool(self.functions.get(name, False))

    @property
    def cycle(self) -> str:
        """Release cycle (major.minor) of the runtime version."""
        parts = self.version.split(".")
        minor = parts[1] if len(parts) > 1 else "0"
        return f"{parts[0]}.{minor}"

    @property
    def version_tuple(self) -> tuple:
        """Numeric version parts, ignoring suffixes such as -dev or RC1."""
        numbers = []
        for part in self.version.split(".")[:3]:
            digits = ""
            for char in part:
                if not char.isdigit():
                    break
                digits += char
            numbers.append(int(digits or 0))
        while len(numbers) < 3:
            numbers.append(0)
        return tuple(numbers)


__all__ = [
    "OpcacheMemoryUsage",
    "OpcacheStatus",
    "PhpRuntime",
]
