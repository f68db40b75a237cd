# ============================================================================
# PHP SETTINGS CHECKS
# ============================================================================
# STATUS: Checks - php.ini limits and runtime configuration
# PURPOSE: Compare ini values and runtime facts against Joomla's needs
# ============================================================================
"""
PHP Settings Checks

Thresholds:
- memory_limit:        < 128M critical, < 256M warning, -1 unlimited
- max_execution_time:  < 30s critical, < 60s warning, 0 unlimited
- max_input_time:      < 60s warning, -1/0 unlimited
- max_input_vars:      < 1000 critical, < 3000 warning
- post_max_size:       < 8M critical, < 32M warning
- upload_max_filesize: < 2M critical, > post_max_size or < 10M warning
- realpath_cache_size: < 4M or > 90% used warning
- opcache:             not loaded/enabled or > 90% memory used warning
- PHP version:         < 8.1.0 critical, < 8.2.0 warning

Byte values use PHP shorthand (128M, 1G) and are converted with
core.units.convert_to_bytes.
"""

import logging

from core.units import convert_to_bytes, format_percent, php_int
from health.core import HealthCheckPlugin, HealthCheckResult
from health.registry import register_check

logger = logging.getLogger(__name__)

MB = 1024 * 1024


@register_check(category="system")
class MemoryLimitCheck(HealthCheckPlugin):
    slug = "system.memory_limit"
    title = "PHP Memory Limit"

    MINIMUM_BYTES = 128 * MB
    RECOMMENDED_BYTES = 256 * MB

    def perform_check(self) -> HealthCheckResult:
        memory_limit = self.require_runtime().ini_get("memory_limit") or ""

        if memory_limit.strip() == "-1":
            return self.good("Memory limit is unlimited.")

        limit = convert_to_bytes(memory_limit)

        if limit < self.MINIMUM_BYTES:
            return self.critical(
                f"Memory limit ({memory_limit}) is below the minimum required 128M."
            )

        if limit < self.RECOMMENDED_BYTES:
            return self.warning(
                f"Memory limit ({memory_limit}) is below the recommended 256M."
            )

        return self.good(f"Memory limit ({memory_limit}) meets requirements.")


@register_check(category="system")
class MaxExecutionTimeCheck(HealthCheckPlugin):
    slug = "system.max_execution_time"
    title = "PHP Max Execution Time"

    MINIMUM_SECONDS = 30
    RECOMMENDED_SECONDS = 60

    def perform_check(self) -> HealthCheckResult:
        seconds = php_int(self.require_runtime().ini_get("max_execution_time"))

        if seconds == 0:
            return self.good("Max execution time is unlimited.")

        if seconds < self.MINIMUM_SECONDS:
            return self.critical(
                f"Max execution time ({seconds}s) is below the minimum required "
                f"{self.MINIMUM_SECONDS}s."
            )

        if seconds < self.RECOMMENDED_SECONDS:
            return self.warning(
                f"Max execution time ({seconds}s) is below the recommended "
                f"{self.RECOMMENDED_SECONDS}s."
            )

        return self.good(f"Max execution time ({seconds}s) meets requirements.")


@register_check(category="system")
class MaxInputTimeCheck(HealthCheckPlugin):
    slug = "system.max_input_time"
    title = "PHP Max Input Time"

    MINIMUM_SECONDS = 60

    def perform_check(self) -> HealthCheckResult:
        seconds = php_int(self.require_runtime().ini_get("max_input_time"))

        if seconds in (-1, 0):
            return self.good("Max input time is unlimited.")

        if seconds < self.MINIMUM_SECONDS:
            return self.warning(
                f"Max input time ({seconds}s) may cause issues with large file uploads. "
                f"Recommended: {self.MINIMUM_SECONDS}s or unlimited (-1)."
            )

        return self.good(f"Max input time ({seconds}s) is adequate.")


@register_check(category="system")
class MaxInputVarsCheck(HealthCheckPlugin):
    slug = "system.max_input_vars"
    title = "PHP Max Input Vars"

    MINIMUM_VARS = 1000
    RECOMMENDED_VARS = 3000

    def perform_check(self) -> HealthCheckResult:
        max_vars = php_int(self.require_runtime().ini_get("max_input_vars"))

        if max_vars < self.MINIMUM_VARS:
            return self.critical(
                f"max_input_vars ({max_vars}) is below the minimum required "
                f"{self.MINIMUM_VARS}. Forms with many fields may lose data."
            )

        if max_vars < self.RECOMMENDED_VARS:
            return self.warning(
                f"max_input_vars ({max_vars}) is below the recommended "
                f"{self.RECOMMENDED_VARS}. Large forms may have issues."
            )

        return self.good(f"max_input_vars ({max_vars}) meets requirements.")


@register_check(category="system")
class PostMaxSizeCheck(HealthCheckPlugin):
    slug = "system.post_max_size"
    title = "PHP Post Max Size"

    MINIMUM_BYTES = 8 * MB
    RECOMMENDED_BYTES = 32 * MB

    def perform_check(self) -> HealthCheckResult:
        post_max_size = self.require_runtime().ini_get("post_max_size")
        if post_max_size is None:
            return self.warning("Unable to retrieve post_max_size setting.")

        size = convert_to_bytes(post_max_size)

        if size < self.MINIMUM_BYTES:
            return self.critical(
                f"post_max_size ({post_max_size}) is below the minimum required 8M."
            )

        if size < self.RECOMMENDED_BYTES:
            return self.warning(
                f"post_max_size ({post_max_size}) is below the recommended 32M."
            )

        return self.good(f"post_max_size ({post_max_size}) meets requirements.")


@register_check(category="system")
class UploadMaxFilesizeCheck(HealthCheckPlugin):
    slug = "system.upload_max_filesize"
    title = "PHP Upload Max Filesize"

    MINIMUM_BYTES = 2 * MB
    RECOMMENDED_BYTES = 10 * MB

    def perform_check(self) -> HealthCheckResult:
        runtime = self.require_runtime()
        upload_max = runtime.ini_get("upload_max_filesize")
        post_max = runtime.ini_get("post_max_size")

        if upload_max is None or post_max is None:
            return self.warning(
                "Unable to retrieve upload_max_filesize or post_max_size settings."
            )

        upload_bytes = convert_to_bytes(upload_max)
        post_bytes = convert_to_bytes(post_max)

        if upload_bytes < self.MINIMUM_BYTES:
            return self.critical(
                f"upload_max_filesize ({upload_max}) is below the minimum required 2M."
            )

        if upload_bytes > post_bytes:
            return self.warning(
                f"upload_max_filesize ({upload_max}) exceeds post_max_size ({post_max}). "
                f"Uploads will be limited by post_max_size."
            )

        if upload_bytes < self.RECOMMENDED_BYTES:
            return self.warning(
                f"upload_max_filesize ({upload_max}) is below the recommended 10M."
            )

        return self.good(f"upload_max_filesize ({upload_max}) meets requirements.")


@register_check(category="system")
class OutputBufferingCheck(HealthCheckPlugin):
    """Informational only; every outcome is Good."""

    slug = "system.output_buffering"
    title = "PHP Output Buffering"

    def perform_check(self) -> HealthCheckResult:
        value = self.require_runtime().ini_get("output_buffering")

        if value in (None, "", "0", "Off"):
            return self.good("Output buffering is disabled (recommended for performance).")

        if value in ("1", "On"):
            return self.good("Output buffering is enabled.")

        return self.good(f"Output buffering is set to {value} bytes.")


@register_check(category="system")
class RealpathCacheCheck(HealthCheckPlugin):
    slug = "system.realpath_cache"
    title = "PHP Realpath Cache"

    RECOMMENDED_SIZE = 4 * MB

    def perform_check(self) -> HealthCheckResult:
        runtime = self.require_runtime()
        cache_size = runtime.ini_get("realpath_cache_size")
        cache_ttl = php_int(runtime.ini_get("realpath_cache_ttl"))

        if cache_size is None:
            return self.warning("Unable to retrieve realpath_cache_size setting.")

        size = convert_to_bytes(cache_size)
        used = runtime.realpath_cache_used or 0
        used_percent = round(used / size * 100, 1) if size > 0 else 0.0

        if size < self.RECOMMENDED_SIZE:
            return self.warning(
                f"Realpath cache size ({cache_size}) is below recommended 4M. "
                f"Current usage: {format_percent(used_percent)}%."
            )

        if used_percent > 90:
            return self.warning(
                f"Realpath cache is nearly full ({format_percent(used_percent)}% used). "
                f"Consider increasing realpath_cache_size."
            )

        return self.good(
            f"Realpath cache: {cache_size} configured, {format_percent(used_percent)}% used, "
            f"TTL {cache_ttl}s."
        )


@register_check(category="system")
class OpcacheCheck(HealthCheckPlugin):
    slug = "system.opcache"
    title = "PHP OPcache"

    def perform_check(self) -> HealthCheckResult:
        runtime = self.require_runtime()

        if not runtime.extension_loaded("Zend OPcache"):
            return self.warning(
                "OPcache extension is not loaded. Performance will be significantly impacted."
            )

        if runtime.ini_get("opcache.enable") in (None, "", "0"):
            return self.warning(
                "OPcache is installed but not enabled. Enable it for better performance."
            )

        status = runtime.opcache_status
        if status is None:
            return self.warning("Unable to get OPcache status.")

        memory = status.memory_usage
        if memory is None:
            return self.good("OPcache is enabled (memory statistics not available).")

        if memory.used_memory is None or memory.free_memory is None:
            return self.good("OPcache is enabled (memory statistics incomplete).")

        used, free = memory.used_memory, memory.free_memory
        if used < 0 or free < 0 or used + free <= 0:
            return self.good(
                "OPcache is enabled (memory statistics unavailable in this context)."
            )

        used_percent = round(used / (used + free) * 100, 1)
        if used_percent < 0 or used_percent > 100:
            return self.good("OPcache is enabled (memory statistics unreliable).")

        if used_percent > 90:
            return self.warning(
                f"OPcache memory usage is high ({format_percent(used_percent)}%). "
                f"Consider increasing opcache.memory_consumption."
            )

        return self.good(
            f"OPcache is enabled and healthy ({format_percent(used_percent)}% memory used)."
        )


@register_check(category="system")
class PhpVersionCheck(HealthCheckPlugin):
    slug = "system.php_version"
    title = "PHP Version"

    MINIMUM_VERSION = (8, 1, 0)
    RECOMMENDED_VERSION = (8, 2, 0)

    def perform_check(self) -> HealthCheckResult:
        runtime = self.require_runtime()
        version = runtime.version

        if runtime.version_tuple < self.MINIMUM_VERSION:
            return self.critical(
                f"PHP {version} is below the minimum required version 8.1.0 for Joomla 5+."
            )

        if runtime.version_tuple < self.RECOMMENDED_VERSION:
            return self.warning(
                f"PHP {version} is supported but 8.2.0 or later is recommended "
                f"for best performance and security."
            )

        return self.good(f"PHP {version} meets all requirements.")


@register_check(category="system")
class PhpSapiCheck(HealthCheckPlugin):
    slug = "system.php_sapi"
    title = "PHP SAPI"

    RECOMMENDED_SAPIS = ("fpm-fcgi", "cgi-fcgi", "litespeed", "frankenphp")

    def perform_check(self) -> HealthCheckResult:
        sapi = self.require_runtime().sapi

        if sapi == "cli":
            return self.warning("Running via CLI. This check is meant for web environments.")

        if sapi in self.RECOMMENDED_SAPIS:
            return self.good(f"PHP SAPI: {sapi} (recommended for performance).")

        if sapi == "apache2handler":
            return self.good(f"PHP SAPI: {sapi} (consider PHP-FPM for better performance).")

        return self.good(f"PHP SAPI: {sapi}")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MemoryLimitCheck",
    "MaxExecutionTimeCheck",
    "MaxInputTimeCheck",
    "MaxInputVarsCheck",
    "PostMaxSizeCheck",
    "UploadMaxFilesizeCheck",
    "OutputBufferingCheck",
    "RealpathCacheCheck",
    "OpcacheCheck",
    "PhpVersionCheck",
    "PhpSapiCheck",
]
