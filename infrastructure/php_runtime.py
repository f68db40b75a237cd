# ============================================================================
# PHP RUNTIME PROBE
# ============================================================================
# STATUS: Infrastructure - PHP interpreter introspection
# PURPOSE: Collect a PhpRuntime snapshot from the php binary or a JSON file
# ============================================================================
"""
PHP Runtime Probe

Most checks inspect the PHP runtime that serves the site. Python cannot
call extension_loaded() or ini_get() directly, so a small PHP script
gathers everything in one pass and prints it as JSON:

    php -r '<PROBE_SCRIPT>'   ->   {"version": "8.3.4", "ini": {...}, ...}

The CLI SAPI can differ from the web SAPI (php.ini, extensions, SAPI name).
For an exact picture, run the same script under the web server, save the
output and point PHP_SNAPSHOT_FILE at it.

Usage:
    probe = PhpRuntimeProbe(php_binary="php8.3")
    runtime = probe.collect()
"""

import json
import logging
import subprocess
from typing import Any, Dict, Optional

from pydantic import ValidationError

from core.models import PhpRuntime

logger = logging.getLogger(__name__)


class PhpRuntimeError(Exception):
    """The PHP runtime snapshot could not be collected."""
    pass


PROBED_INI_KEYS = (
    "memory_limit",
    "max_execution_time",
    "max_input_time",
    "max_input_vars",
    "post_max_size",
    "upload_max_filesize",
    "output_buffering",
    "realpath_cache_size",
    "realpath_cache_ttl",
    "opcache.enable",
    "disable_functions",
    "session.save_path",
)

PROBED_FUNCTIONS = (
    "mail",
    "exif_read_data",
    "apache_get_modules",
    "curl_version",
)

# Keys missing from "ini" mean ini_get() returned false.
PROBE_SCRIPT = """
$ini = [];
foreach (%(ini_keys)s as $key) {
    $value = ini_get($key);
    if ($value !== false) {
        $ini[$key] = (string) $value;
    }
}
$functions = [];
foreach (%(functions)s as $name) {
    $functions[$name] = function_exists($name);
}
$curl = function_exists('curl_version') ? curl_version() : null;
$opcache = function_exists('opcache_get_status') ? @opcache_get_status(false) : false;
echo json_encode([
    'version' => PHP_VERSION,
    'sapi' => PHP_SAPI,
    'extensions' => get_loaded_extensions(),
    'ini' => $ini,
    'functions' => $functions,
    'apache_modules' => function_exists('apache_get_modules') ? apache_get_modules() : null,
    'curl_version' => is_array($curl) ? ($curl['version'] ?? null) : null,
    'openssl_version_text' => defined('OPENSSL_VERSION_TEXT') ? OPENSSL_VERSION_TEXT : null,
    'opcache_status' => is_array($opcache) ? [
        'opcache_enabled' => (bool) ($opcache['opcache_enabled'] ?? false),
        'memory_usage' => $opcache['memory_usage'] ?? null,
    ] : null,
    'realpath_cache_used' => realpath_cache_size(),
    'session_save_path' => (string) session_save_path(),
    'sys_temp_dir' => sys_get_temp_dir(),
    'timezone' => date_default_timezone_get(),
]);
""" % {
    "ini_keys": "['" + "', '".join(PROBED_INI_KEYS) + "']",
    "functions": "['" + "', '".join(PROBED_FUNCTIONS) + "']",
}


class PhpRuntimeProbe:
    """
    Collects PhpRuntime snapshots.

    A snapshot file, when configured, wins over running the binary.
    """

    def __init__(
        self,
        php_binary: str = "php",
        snapshot_file: Optional[str] = None,
        timeout: float = 15.0,
    ):
        self.php_binary = php_binary
        self.snapshot_file = snapshot_file
        self.timeout = timeout

    def collect(self) -> PhpRuntime:
        """Collect a snapshot from the configured source."""
        if self.snapshot_file:
            return self.load_snapshot(self.snapshot_file)
        return self.run_binary()

    def run_binary(self) -> PhpRuntime:
        """Run the probe script with the PHP binary and parse its output."""
        logger.debug(f"Probing PHP runtime with {self.php_binary}")
        try:
            completed = subprocess.run(
                [self.php_binary, "-r", PROBE_SCRIPT],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            raise PhpRuntimeError(f"PHP binary not found: {self.php_binary}")
        except subprocess.TimeoutExpired:
            raise PhpRuntimeError(
                f"PHP probe timed out after {self.timeout}s ({self.php_binary})"
            )

        if completed.returncode != 0:
            stderr = completed.stderr.strip() or "no output"
            raise PhpRuntimeError(
                f"PHP probe exited with code {completed.returncode}: {stderr}"
            )

        return self.parse(completed.stdout, source=self.php_binary)

    def load_snapshot(self, path: str) -> PhpRuntime:
        """Load a snapshot previously produced by the probe script."""
        logger.debug(f"Loading PHP runtime snapshot from {path}")
        try:
            with open(path, "r", encoding="utf-8") as fh:
                content = fh.read()
        except OSError as e:
            raise PhpRuntimeError(f"Cannot read PHP snapshot {path}: {e}")

        return self.parse(content, source=path)

    @staticmethod
    def parse(content: str, source: str = "probe") -> PhpRuntime:
        """Decode probe JSON into a PhpRuntime."""
        try:
            data: Dict[str, Any] = json.loads(content)
        except json.JSONDecodeError as e:
            raise PhpRuntimeError(f"Invalid JSON from {source}: {e}")

        if not isinstance(data, dict):
            raise PhpRuntimeError(f"Expected a JSON object from {source}")

        # json_encode() turns an empty PHP array into [], not {}
        for key in ("ini", "functions"):
            if data.get(key) == []:
                data[key] = {}

        try:
            runtime = PhpRuntime.model_validate(data)
        except ValidationError as e:
            raise PhpRuntimeError(f"Unexpected snapshot shape from {source}: {e}")

        logger.info(
            f"PHP runtime: {runtime.version} ({runtime.sapi}), "
            f"{len(runtime.extensions)} extensions"
        )
        return runtime


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "PhpRuntimeProbe",
    "PhpRuntimeError",
    "PROBE_SCRIPT",
    "PROBED_INI_KEYS",
    "PROBED_FUNCTIONS",
]
