# ============================================================================
# SERVER ENVIRONMENT CHECK TESTS
# ============================================================================
# STATUS: Tests - Filesystem, Apache and mail checks
# PURPOSE: Verify thresholds using tmp_path and a patched psutil
# ============================================================================
"""
Server Environment Check Tests

Run with:
    pytest tests/test_server_checks.py -v
"""

import os
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from core.models import SiteConfiguration
from health.checks.server import (
    ApacheModulesCheck,
    DiskSpaceCheck,
    LogFileSizeCheck,
    MailFunctionCheck,
    SessionSavePathCheck,
    TempDirectoryCheck,
    directory_size,
    disabled_functions,
)
from health.core import HealthStatus

MB = 1024 * 1024


class TestDiskSpace:

    @pytest.mark.parametrize("free,status", [
        (50 * MB, HealthStatus.CRITICAL),
        (100 * MB, HealthStatus.WARNING),
        (499 * MB, HealthStatus.WARNING),
        (500 * MB, HealthStatus.GOOD),
    ])
    def test_thresholds(self, make_context, free, status):
        with patch("health.checks.server.psutil.disk_usage", return_value=SimpleNamespace(free=free)):
            result = DiskSpaceCheck(make_context()).run()
        assert result.status == status

    def test_message(self, make_context):
        with patch("health.checks.server.psutil.disk_usage", return_value=SimpleNamespace(free=2 * 1024 * MB)):
            result = DiskSpaceCheck(make_context()).run()
        assert result.description == "Disk space available: 2 GB free."

    def test_unreadable(self, make_context):
        with patch("health.checks.server.psutil.disk_usage", side_effect=OSError("nope")):
            result = DiskSpaceCheck(make_context()).run()
        assert result.status == HealthStatus.WARNING


class TestTempDirectory:

    def test_default_path_missing(self, make_context, tmp_path):
        result = TempDirectoryCheck(make_context()).run()

        assert result.status == HealthStatus.CRITICAL
        assert result.description == f"Temp directory does not exist: {tmp_path / 'tmp'}"

    def test_writable(self, make_context, tmp_path):
        (tmp_path / "tmp").mkdir()
        assert TempDirectoryCheck(make_context()).run().status == HealthStatus.GOOD

    def test_configured_path(self, make_context, tmp_path):
        site = SiteConfiguration(tmp_path=str(tmp_path))
        assert TempDirectoryCheck(make_context(site=site)).run().status == HealthStatus.GOOD

    def test_not_writable(self, make_context, tmp_path):
        (tmp_path / "tmp").mkdir()
        with patch("health.checks.server.os.access", return_value=False):
            result = TempDirectoryCheck(make_context()).run()
        assert "not writable" in result.description


class TestSessionSavePath:

    def test_writable(self, make_context, make_runtime, tmp_path):
        runtime = make_runtime(session_save_path=str(tmp_path))
        result = SessionSavePathCheck(make_context(runtime=runtime)).run()

        assert result.status == HealthStatus.GOOD
        assert result.description == f"Session save path is writable: {tmp_path}"

    def test_depth_prefix_stripped(self, make_context, make_runtime, tmp_path):
        runtime = make_runtime(session_save_path=f"2;{tmp_path}")
        result = SessionSavePathCheck(make_context(runtime=runtime)).run()
        assert result.status == HealthStatus.GOOD

    def test_empty_falls_back_to_temp_dir(self, make_context, make_runtime, tmp_path):
        runtime = make_runtime(session_save_path="", sys_temp_dir=str(tmp_path))
        result = SessionSavePathCheck(make_context(runtime=runtime)).run()
        assert result.description == f"Session save path is writable: {tmp_path}"

    def test_missing(self, make_context, make_runtime, tmp_path):
        missing = tmp_path / "sessions"
        runtime = make_runtime(session_save_path=str(missing))
        result = SessionSavePathCheck(make_context(runtime=runtime)).run()
        assert result.status == HealthStatus.CRITICAL


class TestLogFileSize:

    def _site(self, path):
        return SiteConfiguration(log_path=str(path))

    def test_missing_directory_is_good(self, make_context, tmp_path):
        result = LogFileSizeCheck(make_context(site=self._site(tmp_path / "logs"))).run()
        assert result.status == HealthStatus.GOOD

    def test_small(self, make_context, tmp_path):
        logs = tmp_path / "logs"
        logs.mkdir()
        (logs / "error.php").write_bytes(b"x" * 2048)

        result = LogFileSizeCheck(make_context(site=self._site(logs))).run()

        assert result.status == HealthStatus.GOOD
        assert result.description == "Log directory size is manageable: 2 KB."

    @pytest.mark.parametrize("size,status", [
        (100 * MB, HealthStatus.GOOD),
        (100 * MB + 1, HealthStatus.WARNING),
        (500 * MB + 1, HealthStatus.CRITICAL),
    ])
    def test_thresholds(self, make_context, tmp_path, size, status):
        logs = tmp_path / "logs"
        logs.mkdir()
        with patch("health.checks.server.directory_size", return_value=size):
            result = LogFileSizeCheck(make_context(site=self._site(logs))).run()
        assert result.status == status

    def test_directory_size_recurses(self, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "one.log").write_bytes(b"1" * 10)
        (tmp_path / "two.log").write_bytes(b"2" * 5)
        assert directory_size(str(tmp_path)) == 15


class TestApacheModules:

    def test_not_apache(self, make_context, make_runtime):
        result = ApacheModulesCheck(make_context(runtime=make_runtime(apache_modules=None))).run()
        assert result.status == HealthStatus.GOOD
        assert "Not running on Apache" in result.description

    def test_missing_rewrite(self, make_context, make_runtime):
        runtime = make_runtime(apache_modules=["core", "mod_headers"])
        result = ApacheModulesCheck(make_context(runtime=runtime)).run()
        assert result.status == HealthStatus.WARNING
        assert result.description == "Required Apache modules may be missing: mod_rewrite"

    def test_optional_missing(self, make_context, make_runtime):
        runtime = make_runtime(apache_modules=["mod_rewrite", "mod_headers"])
        result = ApacheModulesCheck(make_context(runtime=runtime)).run()
        assert result.status == HealthStatus.GOOD
        assert result.description == (
            "Core modules OK. Optional modules not detected: mod_expires, mod_deflate"
        )

    def test_all_present(self, make_context, make_runtime):
        runtime = make_runtime(
            apache_modules=["mod_rewrite", "mod_headers", "mod_expires", "mod_deflate"]
        )
        result = ApacheModulesCheck(make_context(runtime=runtime)).run()
        assert result.description == "All recommended Apache modules are installed."


class TestMailFunction:

    def test_disabled_functions_token_match(self):
        assert disabled_functions("exec, Mail ,system") == {"exec", "mail", "system"}
        assert "mail" not in disabled_functions("mailparse,imap_mail")
        assert disabled_functions(None) == set()

    def test_mail_available(self, make_context):
        result = MailFunctionCheck(make_context(site=SiteConfiguration(mailer="mail"))).run()
        assert result.status == HealthStatus.GOOD

    def test_mail_missing(self, make_context, make_runtime):
        context = make_context(
            site=SiteConfiguration(mailer="mail"),
            runtime=make_runtime(functions={"mail": False}),
        )
        assert MailFunctionCheck(context).run().status == HealthStatus.CRITICAL

    def test_mail_disabled(self, make_context, make_runtime):
        context = make_context(
            site=SiteConfiguration(mailer="mail"),
            runtime=make_runtime(ini={"disable_functions": "exec,mail"}),
        )
        result = MailFunctionCheck(context).run()
        assert result.status == HealthStatus.CRITICAL
        assert "disabled in php.ini" in result.description

    def test_similar_name_not_disabled(self, make_context, make_runtime):
        context = make_context(
            site=SiteConfiguration(mailer="mail"),
            runtime=make_runtime(ini={"disable_functions": "mailparse"}),
        )
        assert MailFunctionCheck(context).run().status == HealthStatus.GOOD

    def test_smtp(self, make_context):
        result = MailFunctionCheck(make_context(site=SiteConfiguration(mailer="smtp"))).run()
        assert result.description == "Joomla is configured to use SMTP for email delivery."

    def test_sendmail_not_executable(self, make_context, tmp_path):
        site = SiteConfiguration(mailer="sendmail", sendmail=str(tmp_path / "sendmail"))
        result = MailFunctionCheck(make_context(site=site)).run()
        assert result.status == HealthStatus.WARNING

    def test_sendmail_executable(self, make_context, tmp_path):
        binary = tmp_path / "sendmail"
        binary.write_text("#!/bin/sh\n")
        os.chmod(binary, 0o755)

        site = SiteConfiguration(mailer="sendmail", sendmail=str(binary))
        result = MailFunctionCheck(make_context(site=site)).run()
        assert result.status == HealthStatus.GOOD
