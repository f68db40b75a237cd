# ============================================================================
# LIFECYCLE & TIME CHECKS
# ============================================================================
# STATUS: Checks - External HTTP lookups
# PURPOSE: PHP end-of-life status and server clock drift
# ============================================================================
"""
Lifecycle & Time Checks

The only checks that leave the host:

- php_eol:     looks up the running PHP release cycle on endoflife.date
- server_time: compares the local clock with the Date header returned
               by well-known HTTPS sites

Both degrade gracefully. A failed EOL lookup is a Warning; an unreachable
time source is Good (nothing could be verified, nothing is known wrong).
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx

from core.units import format_time_diff
from health.core import HealthCheckPlugin, HealthCheckResult
from health.registry import register_check

logger = logging.getLogger(__name__)


def _format_date(value: datetime) -> str:
    """Day without leading zero, short month, year: "8 Dec 2025"."""
    return f"{value.day} {value:%b %Y}"


def _parse_api_date(value: Any) -> datetime:
    """Parse a YYYY-MM-DD date from the API as midnight UTC."""
    if not isinstance(value, str):
        raise ValueError(f"Not a date: {value!r}")
    return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)


@register_check(category="system")
class PhpEolCheck(HealthCheckPlugin):
    slug = "system.php_eol"
    title = "PHP End of Life"

    WARNING_DAYS_THRESHOLD = 90

    def perform_check(self) -> HealthCheckResult:
        runtime = self.require_runtime()
        version = runtime.version

        try:
            eol_data = self.fetch_eol_data()
        except (httpx.HTTPError, ValueError) as e:
            return self.warning(
                f"Unable to fetch PHP end-of-life data: {e}. PHP {version} is installed."
            )

        info = self.find_version_info(eol_data, runtime.cycle)
        if info is None:
            return self.warning(
                f"PHP {version} lifecycle information not found in API. "
                f"This may be a very new or very old version."
            )

        try:
            support_date = _parse_api_date(info.get("support"))
            eol_date = _parse_api_date(info.get("eol"))
        except ValueError:
            return self.warning(
                f"PHP {version} lifecycle dates could not be parsed from API response."
            )

        now = self.context.now()

        if now > eol_date:
            return self.critical(
                f"PHP {version} reached end-of-life on {_format_date(eol_date)} and no "
                f"longer receives security patches. Upgrade immediately."
            )

        if now > support_date:
            days_until_eol = (eol_date - now).days
            return self.warning(
                f"PHP {version} is in security-only support. Active support ended "
                f"{_format_date(support_date)}. EOL in {days_until_eol} days "
                f"({_format_date(eol_date)})."
            )

        days_until_support_ends = (support_date - now).days
        if days_until_support_ends <= self.WARNING_DAYS_THRESHOLD:
            return self.warning(
                f"PHP {version} active support ends in {days_until_support_ends} days "
                f"({_format_date(support_date)}). Plan your upgrade."
            )

        return self.good(
            f"PHP {version} is under active support until {_format_date(support_date)} "
            f"(EOL: {_format_date(eol_date)})."
        )

    def fetch_eol_data(self) -> List[Dict[str, Any]]:
        """
        Fetch the PHP release cycles from the API.

        Raises:
            httpx.HTTPError: On transport failures
            ValueError: On a non-200 status or an unexpected body
        """
        http = self.context.http
        with self.http_client(http.php_eol_timeout) as client:
            response = client.get(http.php_eol_api_url)

        if response.status_code != 200:
            raise ValueError(f"API returned status {response.status_code}")

        data = response.json()
        if not isinstance(data, list):
            raise ValueError("Invalid JSON response")

        return data

    @staticmethod
    def find_version_info(data: List[Dict[str, Any]], cycle: str) -> Optional[Dict[str, Any]]:
        for entry in data:
            if isinstance(entry, dict) and entry.get("cycle") == cycle:
                return entry
        return None


@register_check(category="system")
class ServerTimeCheck(HealthCheckPlugin):
    slug = "system.server_time"
    title = "Server Time"

    WARNING_THRESHOLD_SECONDS = 30
    CRITICAL_THRESHOLD_SECONDS = 300

    DATE_FORMATS = (
        "%a, %d %b %Y %H:%M:%S GMT",
        "%d %b %Y %H:%M:%S GMT",
    )

    def perform_check(self) -> HealthCheckResult:
        tz_name, zone = self._display_zone()

        measured = self.fetch_external_time()

        if measured is None:
            server_time = self.context.now().astimezone(zone)
            return self.good(
                f"Server time: {server_time:%Y-%m-%d %H:%M:%S} ({tz_name}). "
                f"Unable to verify against external time source."
            )

        server_time, external_time, source = measured
        drift = abs(int((server_time - external_time).total_seconds()))

        server_local = f"{server_time.astimezone(zone):%Y-%m-%d %H:%M:%S}"
        external_local = f"{external_time.astimezone(zone):%Y-%m-%d %H:%M:%S}"

        if drift > self.CRITICAL_THRESHOLD_SECONDS:
            return self.critical(
                f"Server time is off by {format_time_diff(drift)}. Server: {server_local}, "
                f"Actual: {external_local} ({tz_name}). Check NTP synchronization immediately."
            )

        if drift > self.WARNING_THRESHOLD_SECONDS:
            return self.warning(
                f"Server time is off by {format_time_diff(drift)}. Server: {server_local}, "
                f"Actual: {external_local} ({tz_name}). Consider checking NTP synchronization."
            )

        return self.good(
            f"Server time is accurate: {server_local} ({tz_name}). "
            f"Verified against {source} (drift: {drift}s)."
        )

    def _display_zone(self) -> Tuple[str, Any]:
        """PHP's default timezone when known, UTC otherwise."""
        runtime = self.context.runtime
        tz_name = runtime.timezone if runtime is not None else "UTC"
        try:
            return tz_name, ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug(f"Unknown timezone {tz_name!r}, displaying UTC")
            return "UTC", timezone.utc

    def fetch_external_time(self) -> Optional[Tuple[datetime, datetime, str]]:
        """Try each time source in order; None when none answers."""
        http = self.context.http
        with self.http_client(http.time_source_timeout) as client:
            for url, name in http.time_sources:
                measured = self._try_source(client, url, name)
                if measured is not None:
                    return measured
        return None

    def _try_source(
        self,
        client: httpx.Client,
        url: str,
        name: str,
    ) -> Optional[Tuple[datetime, datetime, str]]:
        before = self.context.now()
        try:
            response = client.head(url)
        except httpx.HTTPError as e:
            logger.debug(f"Time source {name} unavailable: {e}")
            return None
        after = self.context.now()

        date_header = response.headers.get("date")
        if not date_header:
            return None

        external_time = self.parse_http_date(date_header)
        if external_time is None:
            return None

        # Midpoint of the request, truncated to whole seconds
        midpoint = (int(before.timestamp()) + int(after.timestamp())) // 2
        server_time = datetime.fromtimestamp(midpoint, timezone.utc)

        return server_time, external_time, name

    @classmethod
    def parse_http_date(cls, value: str) -> Optional[datetime]:
        """Parse an RFC 7231 Date header as UTC, or None."""
        for fmt in cls.DATE_FORMATS:
            try:
                return datetime.strptime(value.strip(), fmt).replace(tzinfo=timezone.utc)
            except ValueError:
                continue
        return None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "PhpEolCheck",
    "ServerTimeCheck",
]
