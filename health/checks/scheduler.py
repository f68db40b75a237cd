# ============================================================================
# SCHEDULER CHECKS
# ============================================================================
# STATUS: Checks - Joomla task scheduler (database)
# PURPOSE: Failed and overdue scheduled tasks
# ============================================================================
"""
Scheduler Checks

Both checks run a single COUNT(*) against #__scheduler_tasks.

- failed_tasks:  last_exit_code set and non-zero
- overdue_tasks: enabled tasks whose next_execution has passed
"""

import logging

from core.contracts import TaskState
from health.core import HealthCheckPlugin, HealthCheckResult
from health.registry import register_check

logger = logging.getLogger(__name__)


@register_check(category="system")
class FailedTasksCheck(HealthCheckPlugin):
    slug = "system.failed_tasks"
    title = "Failed Scheduled Tasks"

    QUERY = (
        "SELECT COUNT(*) FROM #__scheduler_tasks "
        "WHERE last_exit_code != 0 AND last_exit_code IS NOT NULL"
    )

    def perform_check(self) -> HealthCheckResult:
        failed = int(self.require_database().fetch_value(self.QUERY) or 0)

        if failed > 5:
            return self.warning(
                f"{failed} scheduled tasks have failed recently. Review the task logs."
            )

        if failed > 0:
            return self.warning(
                f"{failed} scheduled task(s) have failed. Check the scheduler logs for details."
            )

        return self.good("All scheduled tasks are running successfully.")


@register_check(category="system")
class OverdueTasksCheck(HealthCheckPlugin):
    slug = "system.overdue_tasks"
    title = "Overdue Scheduled Tasks"

    QUERY = (
        "SELECT COUNT(*) FROM #__scheduler_tasks "
        "WHERE state = %s AND next_execution < NOW()"
    )

    def perform_check(self) -> HealthCheckResult:
        overdue = int(
            self.require_database().fetch_value(self.QUERY, (TaskState.ENABLED.value,)) or 0
        )

        if overdue > 10:
            return self.critical(
                f"{overdue} scheduled tasks are overdue. The task scheduler may not be running."
            )

        if overdue > 0:
            return self.warning(
                f"{overdue} scheduled task(s) are overdue. Check your cron configuration."
            )

        return self.good("No overdue scheduled tasks.")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "FailedTasksCheck",
    "OverdueTasksCheck",
]
