# ============================================================================
# PHP EXTENSION CHECKS
# ============================================================================
# STATUS: Checks - Required and recommended PHP extensions
# PURPOSE: Verify the extensions Joomla depends on are loaded
# ============================================================================
"""
PHP Extension Checks

One check per extension. Most are a single extension_loaded() lookup,
so they share ExtensionCheck and only declare the extension name, the
status to report when it is missing and the two messages.

Critical when missing: dom, json, mbstring, openssl, pdo_mysql,
simplexml, zip, and GD/Imagick (neither loaded).
Warning when missing: curl, exif, fileinfo, intl.
"""

import logging

from health.core import HealthCheckPlugin, HealthCheckResult, HealthStatus
from health.registry import register_check

logger = logging.getLogger(__name__)


class ExtensionCheck(HealthCheckPlugin):
    """Report whether a single PHP extension is loaded."""

    extension: str = ""
    missing_status: HealthStatus = HealthStatus.CRITICAL
    missing_message: str = ""
    loaded_message: str = ""

    def perform_check(self) -> HealthCheckResult:
        runtime = self.require_runtime()

        if not runtime.extension_loaded(self.extension):
            return self._result(self.missing_status, self.missing_message)

        return self.good(self.loaded_message)


@register_check(category="system")
class CurlExtensionCheck(HealthCheckPlugin):
    slug = "system.curl_extension"
    title = "cURL Extension"

    def perform_check(self) -> HealthCheckResult:
        runtime = self.require_runtime()

        if not runtime.extension_loaded("curl"):
            return self.warning(
                "cURL extension is not loaded. Update checks and some remote "
                "connections may not work."
            )

        if not runtime.curl_version:
            return self.good("cURL extension is loaded.")

        return self.good(f"cURL extension is loaded (libcurl {runtime.curl_version}).")


@register_check(category="system")
class DomExtensionCheck(ExtensionCheck):
    slug = "system.dom_extension"
    title = "DOM Extension"
    extension = "dom"
    missing_message = "DOM extension is not loaded. This is required for Joomla."
    loaded_message = "DOM extension is loaded."


@register_check(category="system")
class ExifExtensionCheck(HealthCheckPlugin):
    """EXIF is detected through exif_read_data(), not extension_loaded()."""

    slug = "system.exif_extension"
    title = "EXIF Extension"

    def perform_check(self) -> HealthCheckResult:
        runtime = self.require_runtime()

        if not runtime.function_exists("exif_read_data"):
            return self.warning(
                "EXIF extension is not installed. Image metadata reading will not be available."
            )

        return self.good("EXIF extension is installed for image metadata support.")


@register_check(category="system")
class FileinfoExtensionCheck(ExtensionCheck):
    slug = "system.fileinfo_extension"
    title = "Fileinfo Extension"
    extension = "fileinfo"
    missing_status = HealthStatus.WARNING
    missing_message = (
        "Fileinfo extension is not loaded. MIME type detection may not work correctly."
    )
    loaded_message = "Fileinfo extension is loaded."


@register_check(category="system")
class GdOrImagickCheck(HealthCheckPlugin):
    slug = "system.gd_or_imagick"
    title = "Image Processing (GD or Imagick)"

    def perform_check(self) -> HealthCheckResult:
        runtime = self.require_runtime()

        loaded = []
        if runtime.extension_loaded("gd"):
            loaded.append("GD")
        if runtime.extension_loaded("imagick"):
            loaded.append("Imagick")

        if not loaded:
            return self.critical(
                "Neither GD nor Imagick extension is loaded. Image processing will not work."
            )

        return self.good(f"{' and '.join(loaded)} extension(s) loaded for image processing.")


@register_check(category="system")
class IntlExtensionCheck(ExtensionCheck):
    slug = "system.intl_extension"
    title = "Intl Extension"
    extension = "intl"
    missing_status = HealthStatus.WARNING
    missing_message = (
        "Intl extension is not loaded. Some internationalization features "
        "may not work correctly."
    )
    loaded_message = "Intl extension is loaded."


@register_check(category="system")
class JsonExtensionCheck(ExtensionCheck):
    slug = "system.json_extension"
    title = "JSON Extension"
    extension = "json"
    missing_message = "JSON extension is not loaded. This is required for Joomla."
    loaded_message = "JSON extension is loaded."


@register_check(category="system")
class MbstringExtensionCheck(ExtensionCheck):
    slug = "system.mbstring_extension"
    title = "Mbstring Extension"
    extension = "mbstring"
    missing_message = (
        "Mbstring extension is not loaded. This is required for proper UTF-8 handling."
    )
    loaded_message = "Mbstring extension is loaded."


@register_check(category="system")
class OpenSslExtensionCheck(HealthCheckPlugin):
    slug = "system.openssl_extension"
    title = "OpenSSL Extension"

    def perform_check(self) -> HealthCheckResult:
        runtime = self.require_runtime()

        if not runtime.extension_loaded("openssl"):
            return self.critical(
                "OpenSSL extension is not loaded. HTTPS connections and encryption will not work."
            )

        version = runtime.openssl_version_text or "version unknown"
        return self.good(f"OpenSSL extension is loaded ({version}).")


@register_check(category="system")
class PdoMysqlExtensionCheck(ExtensionCheck):
    slug = "system.pdo_mysql_extension"
    title = "PDO MySQL Extension"
    extension = "pdo_mysql"
    missing_message = (
        "PDO MySQL extension is not loaded. This is required for Joomla "
        "database connectivity."
    )
    loaded_message = "PDO MySQL extension is loaded."


@register_check(category="system")
class SimpleXmlExtensionCheck(ExtensionCheck):
    slug = "system.simplexml_extension"
    title = "SimpleXML Extension"
    extension = "simplexml"
    missing_message = "SimpleXML extension is not loaded. This is required for Joomla."
    loaded_message = "SimpleXML extension is loaded."


@register_check(category="system")
class ZipExtensionCheck(ExtensionCheck):
    slug = "system.zip_extension"
    title = "Zip Extension"
    extension = "zip"
    missing_message = "Zip extension is not loaded. Extension installation will not work."
    loaded_message = "Zip extension is loaded."


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ExtensionCheck",
    "CurlExtensionCheck",
    "DomExtensionCheck",
    "ExifExtensionCheck",
    "FileinfoExtensionCheck",
    "GdOrImagickCheck",
    "IntlExtensionCheck",
    "JsonExtensionCheck",
    "MbstringExtensionCheck",
    "OpenSslExtensionCheck",
    "PdoMysqlExtensionCheck",
    "SimpleXmlExtensionCheck",
    "ZipExtensionCheck",
]
