# ============================================================================
# AKEEBA BACKUP CHECKS
# ============================================================================
# STATUS: Checks - Third-party integration (akeeba_backup provider)
# PURPOSE: Backup recency, success rate and profile configuration
# ============================================================================
"""
Akeeba Backup Checks

Registers its own category (akeeba_backup, sort order 85) and provider.
Every check first looks for the Akeeba tables; without them the result
is a Warning saying Akeeba Backup is not installed.

Backup timestamps (backupstart) are stored in UTC. Time windows are
computed here and passed as query parameters, so the same SQL runs on
MySQL and PostgreSQL.
"""

import logging
from abc import abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.contracts import BackupStatus
from core.units import format_bytes_fixed
from health.core import (
    HealthCategory,
    HealthCheckPlugin,
    HealthCheckResult,
    ProviderMetadata,
)
from health.registry import register_category, register_check, register_provider

logger = logging.getLogger(__name__)


AKEEBA_CATEGORY = register_category(
    HealthCategory(
        slug="akeeba_backup",
        label="Akeeba Backup",
        icon="fa-archive",
        sort_order=85,
        logo_url="/media/plg_healthchecker_akeebabackup/logo.png",
    )
)

AKEEBA_PROVIDER = register_provider(
    ProviderMetadata(
        slug="akeeba_backup",
        name="Akeeba Backup (Unofficial)",
        description="Checks provided unofficially for this plugin as an example of 3rd party integration",
        url="https://www.akeeba.com",
        logo_url="/media/plg_healthchecker_akeebabackup/logo.png",
    )
)

BACKUPS_TABLE = "#__akeebabackup_backups"
PROFILES_TABLE = "#__akeebabackup_profiles"

_SQL_DATETIME = "%Y-%m-%d %H:%M:%S"


class AkeebaBackupCheck(HealthCheckPlugin):
    """Base class: table presence guard, shared action link and time helpers."""

    category = "akeeba_backup"
    provider = "akeeba_backup"
    docs_url = "https://www.akeeba.com/documentation/akeeba-backup-joomla.html"
    action_url = "/administrator/index.php?option=com_akeebabackup"

    table = BACKUPS_TABLE

    def perform_check(self) -> HealthCheckResult:
        database = self.require_database()

        if not database.table_exists(self.table):
            return self.warning("Akeeba Backup is not installed.")

        return self.check_backups(database)

    @abstractmethod
    def check_backups(self, database) -> HealthCheckResult:
        """Run the check once the backups table is known to exist."""

    def since(self, **delta) -> str:
        """SQL datetime string for now minus the given timedelta."""
        return (self.context.now() - timedelta(**delta)).strftime(_SQL_DATETIME)

    def count(self, database, where: str, params=()) -> int:
        query = f"SELECT COUNT(*) FROM {self.table} WHERE {where}"
        return int(database.fetch_value(query, params) or 0)


def parse_backup_time(value) -> Optional[datetime]:
    """Interpret a backupstart value (datetime or string) as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@register_check()
class AkeebaInstalledCheck(AkeebaBackupCheck):
    slug = "akeeba_backup.installed"
    title = "Akeeba Backup Installed"

    def check_backups(self, database) -> HealthCheckResult:
        return self.good("Akeeba Backup is installed.")


@register_check()
class AkeebaLastBackupCheck(AkeebaBackupCheck):
    slug = "akeeba_backup.last_backup"
    title = "Last Backup"

    def check_backups(self, database) -> HealthCheckResult:
        last_backup = database.fetch_value(
            f"SELECT backupstart FROM {self.table} WHERE status = %s "
            f"ORDER BY backupstart DESC LIMIT 1",
            (BackupStatus.COMPLETE.value,),
        )

        if not last_backup:
            return self.critical("No completed backups found.")

        backup_time = parse_backup_time(last_backup)
        if backup_time is None:
            return self.warning("Unable to parse last backup timestamp.")

        days = (self.context.now() - backup_time).total_seconds() / 86400
        when = f"{backup_time:%Y-%m-%d %H:%M}"

        if days > 7:
            return self.critical(
                f"Last backup was {days:.1f} days ago ({when}). "
                f"Backups should run at least weekly."
            )

        if days > 3:
            return self.warning(
                f"Last backup was {days:.1f} days ago ({when}). "
                f"Consider more frequent backups."
            )

        return self.good(f"Last backup completed {days:.1f} days ago ({when}).")


@register_check()
class AkeebaSuccessRateCheck(AkeebaBackupCheck):
    slug = "akeeba_backup.success_rate"
    title = "Backup Success Rate"

    def check_backups(self, database) -> HealthCheckResult:
        since = self.since(days=30)
        total = self.count(database, "backupstart >= %s", (since,))

        if total == 0:
            return self.warning("No backups attempted in the last 30 days.")

        successful = self.count(
            database,
            "backupstart >= %s AND status = %s",
            (since, BackupStatus.COMPLETE.value),
        )
        rate = successful / total * 100
        message = (
            f"Backup success rate is {rate:.1f}% ({successful} of {total} "
            f"backups successful in last 30 days)."
        )

        if rate < 90:
            return self.warning(message)

        return self.good(message)


@register_check()
class AkeebaStuckBackupsCheck(AkeebaBackupCheck):
    slug = "akeeba_backup.stuck_backups"
    title = "Stuck Backups"

    def check_backups(self, database) -> HealthCheckResult:
        stuck = self.count(
            database,
            "instep = 1 AND status IN (%s, %s) AND backupstart < %s",
            (BackupStatus.RUN.value, BackupStatus.FAIL.value, self.since(hours=24)),
        )

        if stuck > 0:
            return self.critical(
                f"Found {stuck} stuck backup(s) that started over 24 hours ago and are "
                f"still marked as running or failed."
            )

        return self.good("No stuck backups detected.")


@register_check()
class AkeebaFilesExistCheck(AkeebaBackupCheck):
    slug = "akeeba_backup.files_exist"
    title = "Backup Files Exist"

    def check_backups(self, database) -> HealthCheckResult:
        missing = self.count(
            database,
            "status = %s AND filesexist = 0",
            (BackupStatus.COMPLETE.value,),
        )

        if missing > 0:
            return self.warning(
                f"Found {missing} completed backup(s) with missing files. "
                f"Backup archives may have been deleted."
            )

        return self.good("All completed backup files exist.")


@register_check()
class AkeebaBackupSizeCheck(AkeebaBackupCheck):
    """Informational only; always Good."""

    slug = "akeeba_backup.backup_size"
    title = "Backup Storage Size"

    def check_backups(self, database) -> HealthCheckResult:
        total = database.fetch_value(
            f"SELECT SUM(total_size) FROM {self.table} WHERE status = %s AND filesexist = 1",
            (BackupStatus.COMPLETE.value,),
        )
        return self.good(f"Total backup storage: {format_bytes_fixed(int(total or 0))}")


@register_check()
class AkeebaProfileExistsCheck(AkeebaBackupCheck):
    slug = "akeeba_backup.profile_exists"
    title = "Backup Profile Exists"
    table = PROFILES_TABLE

    def check_backups(self, database) -> HealthCheckResult:
        profiles = int(database.fetch_value(f"SELECT COUNT(*) FROM {self.table}") or 0)

        if profiles == 0:
            return self.warning(
                "No backup profiles found. Create a backup profile to enable backups."
            )

        return self.good(f"{profiles} backup profile(s) configured.")


@register_check()
class AkeebaProfileConfiguredCheck(AkeebaBackupCheck):
    slug = "akeeba_backup.profile_configured"
    title = "Default Profile Configured"
    table = PROFILES_TABLE

    def check_backups(self, database) -> HealthCheckResult:
        configuration = database.fetch_value(
            f"SELECT configuration FROM {self.table} WHERE id = 1"
        )

        if not configuration:
            return self.warning("Default backup profile (ID 1) is not configured.")

        return self.good("Default backup profile is configured.")


@register_check()
class AkeebaFailedBackupsCheck(AkeebaBackupCheck):
    slug = "akeeba_backup.failed_backups"
    title = "Failed Backups"

    def check_backups(self, database) -> HealthCheckResult:
        failed = self.count(
            database,
            "backupstart >= %s AND status = %s",
            (self.since(days=30), BackupStatus.FAIL.value),
        )

        if failed > 0:
            return self.warning(
                f"{failed} backup(s) failed in the last 30 days. "
                f"Review Akeeba Backup logs for details."
            )

        return self.good("No failed backups in the last 30 days.")


@register_check()
class AkeebaFrequencyCheck(AkeebaBackupCheck):
    slug = "akeeba_backup.frequency"
    title = "Backup Frequency"

    def check_backups(self, database) -> HealthCheckResult:
        completed = self.count(
            database,
            "backupstart >= %s AND status = %s",
            (self.since(days=30), BackupStatus.COMPLETE.value),
        )

        if completed == 0:
            return self.critical(
                "No successful backups in the last 30 days. Schedule regular backups immediately."
            )

        if completed < 4:
            return self.warning(
                f"Only {completed} successful backup(s) in the last 30 days. "
                f"Consider scheduling weekly backups."
            )

        return self.good(f"{completed} successful backup(s) in the last 30 days.")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "AKEEBA_CATEGORY",
    "AKEEBA_PROVIDER",
    "AkeebaBackupCheck",
    "AkeebaInstalledCheck",
    "AkeebaLastBackupCheck",
    "AkeebaSuccessRateCheck",
    "AkeebaStuckBackupsCheck",
    "AkeebaFilesExistCheck",
    "AkeebaBackupSizeCheck",
    "AkeebaProfileExistsCheck",
    "AkeebaProfileConfiguredCheck",
    "AkeebaFailedBackupsCheck",
    "AkeebaFrequencyCheck",
]
