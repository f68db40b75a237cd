#!/usr/bin/env python3
# ============================================================================
# CLI HEALTH CHECK TOOL
# ============================================================================
# STATUS: Tool - Run health checks from the command line
# PURPOSE: Cron/CI friendly report with a status-based exit code
# ============================================================================
"""
Run the Joomla health checks without the HTTP server.

Usage:
    # Full report
    python tools/run_checks.py

    # One check or one category
    python tools/run_checks.py --check system.memory_limit
    python tools/run_checks.py --category akeeba_backup

    # JSON output (same document as /health/export.json)
    python tools/run_checks.py --json

    # Fail on warnings too
    python tools/run_checks.py --strict

Exit codes:
    0 - Good (or Warning without --strict)
    1 - Warning with --strict
    2 - Critical
    3 - Unknown check slug

Configuration comes from the environment (JOOMLA_ROOT, DATABASE_URL,
PHP_BINARY, PHP_SNAPSHOT_FILE, HEALTHCHECKER_CONFIG, ...).
"""

import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import get_defaults
from core.logging import configure_logging
from health.bootstrap import build_context, build_runner
from health.core import HealthCheckResult, HealthStatus
from health.executor import HealthCheckRunner
from infrastructure import close_database

EXIT_UNKNOWN_CHECK = 3

STATUS_MARKERS = {
    HealthStatus.CRITICAL: "[CRITICAL]",
    HealthStatus.WARNING: "[WARNING] ",
    HealthStatus.GOOD: "[GOOD]    ",
}


def exit_code(status: HealthStatus, strict: bool = False) -> int:
    """Map the overall status to a process exit code."""
    if status == HealthStatus.CRITICAL:
        return 2
    if status == HealthStatus.WARNING and strict:
        return 1
    return 0


def format_result(result: HealthCheckResult) -> str:
    line = f"{STATUS_MARKERS[result.status]} {result.title}: {result.description}"
    if result.action_url and result.status != HealthStatus.GOOD:
        line += f"\n             -> {result.action_url}"
    return line


async def run(runner: HealthCheckRunner, args) -> int:
    """Execute the requested checks, print them and return the exit code."""
    if args.check:
        result = await runner.run_single(args.check)
        if result is None:
            print(f"Health check not found: {args.check}", file=sys.stderr)
            return EXIT_UNKNOWN_CHECK

        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            print(format_result(result))
        return exit_code(result.status, args.strict)

    if args.category:
        results = await runner.run_category(args.category)
        status = HealthStatus.aggregate([r.status for r in results.values()])

        if args.json:
            payload = {
                "category": args.category,
                "results": {slug: r.to_dict() for slug, r in results.items()},
            }
            print(json.dumps(payload, indent=2))
        else:
            for result in results.values():
                print(format_result(result))
            print(f"\n{len(results)} checks in {args.category}: {status.label}")
        return exit_code(status, args.strict)

    report = await runner.run_all()

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
        return exit_code(report.status, args.strict)

    for category, results in report.by_category().items():
        meta = runner.registry.get_category(category)
        print(f"\n== {meta.label if meta else category} ==")
        for result in results:
            print(format_result(result))

    print(
        f"\n{report.total_count} checks: {report.critical_count} critical, "
        f"{report.warning_count} warning, {report.good_count} good "
        f"(last run {report.last_run_iso})"
    )
    return exit_code(report.status, args.strict)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run Joomla health checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s
  %(prog)s --check system.php_version
  %(prog)s --category security --json
        """,
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--check",
        metavar="SLUG",
        help="Run a single check (e.g. system.memory_limit)",
    )
    target.add_argument(
        "--category",
        metavar="SLUG",
        help="Run the checks of one category (e.g. security)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON instead of text",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with 1 when any check is a warning",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "WARNING"),
        help="Log level for diagnostics on stderr (default: WARNING)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(level=args.log_level)

    defaults = get_defaults()
    runner = build_runner(build_context(defaults), defaults)
    try:
        return asyncio.run(run(runner, args))
    finally:
        runner.close()
        close_database()


if __name__ == "__main__":
    sys.exit(main())
