# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export core contracts, models, and unit helpers
# ============================================================================

from core.contracts import MailerType, DatabaseDriver, BackupStatus, TaskState
from core.models import PhpRuntime, SiteConfiguration

__all__ = [
    # Enums
    "MailerType",
    "DatabaseDriver",
    "BackupStatus",
    "TaskState",
    # Models
    "PhpRuntime",
    "SiteConfiguration",
]
