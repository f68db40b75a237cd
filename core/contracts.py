# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Enums for values read from Joomla
# PURPOSE: Name the raw strings stored in configuration.php and site tables
# EXPORTS: MailerType, DatabaseDriver, BackupStatus, TaskState
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the health checker.

These name the raw values that cross the boundary into Python:
- configuration.php (mailer, dbtype)
- Akeeba Backup tables (backup status)
- Joomla scheduler tables (task state)
"""

from enum import Enum
from typing import Optional


class MailerType(str, Enum):
    """Joomla global mailer setting ($mailer)."""
    MAIL = "mail"
    SMTP = "smtp"
    SENDMAIL = "sendmail"


class DatabaseDriver(str, Enum):
    """
    Database dialect behind a Joomla site.

    Joomla's $dbtype values map onto two dialects:
        mysqli, mysql, pdomysql -> MYSQL
        pgsql, postgresql       -> POSTGRESQL
    """
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"

    @classmethod
    def from_joomla(cls, dbtype: Optional[str]) -> "DatabaseDriver":
        """Map a configuration.php dbtype onto a dialect."""
        value = (dbtype or "mysqli").lower()
        if value in ("pgsql", "postgresql", "postgres"):
            return cls.POSTGRESQL
        if value in ("mysqli", "mysql", "pdomysql"):
            return cls.MYSQL
        raise ValueError(f"Unsupported Joomla database type: {dbtype}")


class BackupStatus(str, Enum):
    """Akeeba Backup record status column."""
    COMPLETE = "complete"
    RUN = "run"
    FAIL = "fail"


class TaskState(int, Enum):
    """Joomla scheduler task state column."""
    TRASHED = -2
    DISABLED = 0
    ENABLED = 1


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MailerType",
    "DatabaseDriver",
    "BackupStatus",
    "TaskState",
]
