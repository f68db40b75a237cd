# ============================================================================
# SERVER ENVIRONMENT CHECKS
# ============================================================================
# STATUS: Checks - Filesystem, web server and mail environment
# PURPOSE: Disk, temp/session/log directories, Apache modules, mail()
# ============================================================================
"""
Server Environment Checks

Filesystem checks run against the local filesystem, so the checker must
run on the host (or in the container) that serves the site.

- disk_space:        < 100 MB free critical, < 500 MB warning
- temp_directory:    Joomla tmp_path must exist and be writable
- session_save_path: PHP session directory must exist and be writable
- log_file_size:     Joomla log_path > 500 MB critical, > 100 MB warning
- apache_modules:    mod_rewrite required under Apache
- mail_function:     the configured mailer must be usable
"""

import logging
import os

import psutil

from core.contracts import MailerType
from core.units import format_bytes
from health.core import HealthCheckPlugin, HealthCheckResult
from health.registry import register_check

logger = logging.getLogger(__name__)

MB = 1024 * 1024


@register_check(category="system")
class DiskSpaceCheck(HealthCheckPlugin):
    slug = "system.disk_space"
    title = "Disk Space"

    CRITICAL_BYTES = 100 * MB
    WARNING_BYTES = 500 * MB

    def perform_check(self) -> HealthCheckResult:
        try:
            free = psutil.disk_usage(self.context.site_root).free
        except OSError as e:
            logger.debug(f"disk_usage({self.context.site_root}) failed: {e}")
            return self.warning("Unable to determine available disk space.")

        free_formatted = format_bytes(free)

        if free < self.CRITICAL_BYTES:
            return self.critical(f"Disk space critically low: {free_formatted} free.")

        if free < self.WARNING_BYTES:
            return self.warning(f"Disk space is running low: {free_formatted} free.")

        return self.good(f"Disk space available: {free_formatted} free.")


@register_check(category="system")
class TempDirectoryCheck(HealthCheckPlugin):
    slug = "system.temp_directory"
    title = "Temp Directory"

    def perform_check(self) -> HealthCheckResult:
        tmp_path = self.require_site().resolve_tmp_path(self.context.site_root)

        if not os.path.isdir(tmp_path):
            return self.critical(f"Temp directory does not exist: {tmp_path}")

        if not os.access(tmp_path, os.W_OK):
            return self.critical(f"Temp directory is not writable: {tmp_path}")

        return self.good("Temp directory exists and is writable.")


@register_check(category="system")
class SessionSavePathCheck(HealthCheckPlugin):
    slug = "system.session_save_path"
    title = "Session Save Path"

    def perform_check(self) -> HealthCheckResult:
        runtime = self.require_runtime()
        save_path = runtime.session_save_path or ""

        # "N;/path" and "N;MODE;/path" spread sessions over subdirectories
        save_path = save_path.rsplit(";", 1)[-1]

        if save_path in ("", "0"):
            save_path = runtime.sys_temp_dir or "/tmp"

        if not os.path.isdir(save_path):
            return self.critical(f"Session save path does not exist: {save_path}")

        if not os.access(save_path, os.W_OK):
            return self.critical(f"Session save path is not writable: {save_path}")

        return self.good(f"Session save path is writable: {save_path}")


def _raise(error: OSError):
    raise error


def directory_size(path: str) -> int:
    """Total size of the regular files below path."""
    total = 0
    for root, _dirs, files in os.walk(path, onerror=_raise):
        for name in files:
            file_path = os.path.join(root, name)
            if os.path.isfile(file_path):
                total += os.path.getsize(file_path)
    return total


@register_check(category="system")
class LogFileSizeCheck(HealthCheckPlugin):
    slug = "system.log_file_size"
    title = "Log File Size"

    WARNING_BYTES = 100 * MB
    CRITICAL_BYTES = 500 * MB

    def perform_check(self) -> HealthCheckResult:
        log_path = self.require_site().resolve_log_path(self.context.site_root)

        if not os.path.isdir(log_path):
            return self.good("Log directory does not exist or is not accessible.")

        if not os.access(log_path, os.R_OK):
            return self.warning(f"Log directory is not readable: {log_path}")

        try:
            total = directory_size(log_path)
        except OSError as e:
            return self.warning(f"Unable to calculate log directory size: {e}")

        size_formatted = format_bytes(total)

        if total > self.CRITICAL_BYTES:
            return self.critical(
                f"Log directory is very large: {size_formatted}. Consider cleaning up "
                f"old logs and investigating what is generating excessive log entries."
            )

        if total > self.WARNING_BYTES:
            return self.warning(
                f"Log directory is growing large: {size_formatted}. "
                f"Consider reviewing and rotating logs."
            )

        return self.good(f"Log directory size is manageable: {size_formatted}.")


@register_check(category="system")
class ApacheModulesCheck(HealthCheckPlugin):
    slug = "system.apache_modules"
    title = "Apache Modules"

    REQUIRED_MODULES = ("mod_rewrite",)
    RECOMMENDED_MODULES = ("mod_headers", "mod_expires", "mod_deflate")

    def perform_check(self) -> HealthCheckResult:
        modules = self.require_runtime().apache_modules

        if modules is None:
            return self.good("Not running on Apache or module detection not available.")

        missing = [m for m in self.REQUIRED_MODULES if m not in modules]
        if missing:
            return self.warning(
                f"Required Apache modules may be missing: {', '.join(missing)}"
            )

        missing_recommended = [m for m in self.RECOMMENDED_MODULES if m not in modules]
        if missing_recommended:
            return self.good(
                f"Core modules OK. Optional modules not detected: "
                f"{', '.join(missing_recommended)}"
            )

        return self.good("All recommended Apache modules are installed.")


def disabled_functions(value) -> set:
    """Parse php.ini disable_functions into a set of lower-case names."""
    return {name.strip().lower() for name in (value or "").split(",") if name.strip()}


@register_check(category="system")
class MailFunctionCheck(HealthCheckPlugin):
    slug = "system.mail_function"
    title = "Mail Configuration"

    def perform_check(self) -> HealthCheckResult:
        site = self.require_site()
        mailer = site.mailer

        if mailer == MailerType.MAIL.value:
            runtime = self.require_runtime()

            if not runtime.function_exists("mail"):
                return self.critical(
                    "PHP mail() function is not available but Joomla is configured to use it."
                )

            if "mail" in disabled_functions(runtime.ini_get("disable_functions")):
                return self.critical(
                    "PHP mail() function is disabled in php.ini but Joomla is "
                    "configured to use it."
                )

            return self.good("PHP mail() function is available.")

        if mailer == MailerType.SMTP.value:
            return self.good("Joomla is configured to use SMTP for email delivery.")

        if mailer == MailerType.SENDMAIL.value:
            sendmail_path = site.sendmail
            if not (os.path.isfile(sendmail_path) and os.access(sendmail_path, os.X_OK)):
                return self.warning(f"Sendmail path may not be executable: {sendmail_path}")

            return self.good("Sendmail is configured for email delivery.")

        return self.good(f"Mail is configured using: {mailer}")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DiskSpaceCheck",
    "TempDirectoryCheck",
    "SessionSavePathCheck",
    "LogFileSizeCheck",
    "ApacheModulesCheck",
    "MailFunctionCheck",
    "directory_size",
    "disabled_functions",
]
