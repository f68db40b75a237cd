# ============================================================================
# AKEEBA BACKUP CHECK TESTS
# ============================================================================
# STATUS: Tests - Third-party Akeeba Backup integration
# PURPOSE: Verify backup recency, rates and profile checks
# ============================================================================
"""
Akeeba Backup Check Tests

The database is a MagicMock; the check clock is fixed at
2026-03-15 12:00:00 UTC.

Run with:
    pytest tests/test_akeeba_checks.py -v
"""

from datetime import datetime, timedelta

import pytest

from health.checks.akeeba import (
    AkeebaBackupCheck,
    AkeebaBackupSizeCheck,
    AkeebaFailedBackupsCheck,
    AkeebaFilesExistCheck,
    AkeebaFrequencyCheck,
    AkeebaInstalledCheck,
    AkeebaLastBackupCheck,
    AkeebaProfileConfiguredCheck,
    AkeebaProfileExistsCheck,
    AkeebaStuckBackupsCheck,
    AkeebaSuccessRateCheck,
    parse_backup_time,
)
from health.core import HealthStatus

ALL_CHECKS = [
    AkeebaInstalledCheck,
    AkeebaLastBackupCheck,
    AkeebaSuccessRateCheck,
    AkeebaStuckBackupsCheck,
    AkeebaFilesExistCheck,
    AkeebaBackupSizeCheck,
    AkeebaProfileExistsCheck,
    AkeebaProfileConfiguredCheck,
    AkeebaFailedBackupsCheck,
    AkeebaFrequencyCheck,
]

NOW = datetime(2026, 3, 15, 12, 0, 0)


@pytest.fixture
def run(make_context, mock_db):
    def _run(check_class):
        return check_class(make_context(database=mock_db)).run()
    return _run


class TestNotInstalled:

    @pytest.mark.parametrize("check_class", ALL_CHECKS)
    def test_missing_table_is_warning(self, run, mock_db, check_class):
        mock_db.table_exists.return_value = False

        result = run(check_class)

        assert result.status == HealthStatus.WARNING
        assert result.description == "Akeeba Backup is not installed."
        assert result.category == "akeeba_backup"
        assert result.provider == "akeeba_backup"
        assert result.action_url == "/administrator/index.php?option=com_akeebabackup"

    def test_base_class_is_abstract(self, make_context, mock_db):
        with pytest.raises(TypeError):
            AkeebaBackupCheck(make_context(database=mock_db))

    def test_installed(self, run):
        assert run(AkeebaInstalledCheck).description == "Akeeba Backup is installed."

    def test_profile_checks_use_profiles_table(self, run, mock_db):
        mock_db.fetch_value.return_value = 1
        run(AkeebaProfileExistsCheck)
        mock_db.table_exists.assert_called_with("#__akeebabackup_profiles")


class TestLastBackup:

    def test_none(self, run, mock_db):
        mock_db.fetch_value.return_value = None
        result = run(AkeebaLastBackupCheck)
        assert result.status == HealthStatus.CRITICAL
        assert result.description == "No completed backups found."

    def test_unparsable(self, run, mock_db):
        mock_db.fetch_value.return_value = "not a date"
        assert run(AkeebaLastBackupCheck).description == "Unable to parse last backup timestamp."

    @pytest.mark.parametrize("age_days,status", [
        (1, HealthStatus.GOOD),
        (3, HealthStatus.GOOD),
        (3.5, HealthStatus.WARNING),
        (7, HealthStatus.WARNING),
        (8, HealthStatus.CRITICAL),
    ])
    def test_age(self, run, mock_db, age_days, status):
        mock_db.fetch_value.return_value = NOW - timedelta(days=age_days)
        assert run(AkeebaLastBackupCheck).status == status

    def test_messages(self, run, mock_db):
        mock_db.fetch_value.return_value = "2026-03-14 00:00:00"
        assert run(AkeebaLastBackupCheck).description == (
            "Last backup completed 1.5 days ago (2026-03-14 00:00)."
        )

        mock_db.fetch_value.return_value = "2026-03-05 12:00:00"
        assert run(AkeebaLastBackupCheck).description == (
            "Last backup was 10.0 days ago (2026-03-05 12:00). "
            "Backups should run at least weekly."
        )

    def test_parse_backup_time(self):
        parsed = parse_backup_time("2026-03-14 08:30:00")
        assert parsed.tzinfo is not None
        assert parsed.hour == 8
        assert parse_backup_time("0000-00-00 00:00:00") is None


class TestSuccessRate:

    def test_no_attempts(self, run, mock_db):
        mock_db.fetch_value.return_value = 0
        result = run(AkeebaSuccessRateCheck)
        assert result.status == HealthStatus.WARNING
        assert result.description == "No backups attempted in the last 30 days."

    @pytest.mark.parametrize("total,successful,status", [
        (10, 10, HealthStatus.GOOD),
        (10, 9, HealthStatus.GOOD),
        (10, 8, HealthStatus.WARNING),
    ])
    def test_rate(self, run, mock_db, total, successful, status):
        mock_db.fetch_value.side_effect = [total, successful]
        assert run(AkeebaSuccessRateCheck).status == status

    def test_message_and_window(self, run, mock_db):
        mock_db.fetch_value.side_effect = [3, 2]

        result = run(AkeebaSuccessRateCheck)

        assert result.description == (
            "Backup success rate is 66.7% (2 of 3 backups successful in last 30 days)."
        )
        first_params = mock_db.fetch_value.call_args_list[0][0][1]
        assert first_params == ("2026-02-13 12:00:00",)


class TestStuckAndFiles:

    def test_stuck(self, run, mock_db):
        mock_db.fetch_value.return_value = 2
        result = run(AkeebaStuckBackupsCheck)

        assert result.status == HealthStatus.CRITICAL
        assert result.description.startswith("Found 2 stuck backup(s)")
        query, params = mock_db.fetch_value.call_args[0]
        assert "instep = 1" in query
        assert params == ("run", "fail", "2026-03-14 12:00:00")

    def test_not_stuck(self, run, mock_db):
        mock_db.fetch_value.return_value = 0
        assert run(AkeebaStuckBackupsCheck).description == "No stuck backups detected."

    def test_missing_files(self, run, mock_db):
        mock_db.fetch_value.return_value = 1
        result = run(AkeebaFilesExistCheck)
        assert result.status == HealthStatus.WARNING
        assert "1 completed backup(s) with missing files" in result.description

    def test_files_present(self, run, mock_db):
        mock_db.fetch_value.return_value = 0
        assert run(AkeebaFilesExistCheck).description == "All completed backup files exist."


class TestBackupSize:

    @pytest.mark.parametrize("total,text", [
        (None, "Total backup storage: 0 B"),
        (0, "Total backup storage: 0 B"),
        (1610612736, "Total backup storage: 1.50 GB"),
    ])
    def test_size(self, run, mock_db, total, text):
        mock_db.fetch_value.return_value = total
        result = run(AkeebaBackupSizeCheck)
        assert result.status == HealthStatus.GOOD
        assert result.description == text


class TestProfiles:

    def test_no_profiles(self, run, mock_db):
        mock_db.fetch_value.return_value = 0
        assert run(AkeebaProfileExistsCheck).status == HealthStatus.WARNING

    def test_profiles(self, run, mock_db):
        mock_db.fetch_value.return_value = 2
        assert run(AkeebaProfileExistsCheck).description == "2 backup profile(s) configured."

    @pytest.mark.parametrize("configuration,status", [
        (None, HealthStatus.WARNING),
        ("", HealthStatus.WARNING),
        ("[akeeba]\nkey=value", HealthStatus.GOOD),
    ])
    def test_default_profile(self, run, mock_db, configuration, status):
        mock_db.fetch_value.return_value = configuration
        assert run(AkeebaProfileConfiguredCheck).status == status


class TestFailedAndFrequency:

    def test_failed(self, run, mock_db):
        mock_db.fetch_value.return_value = 3
        result = run(AkeebaFailedBackupsCheck)
        assert result.status == HealthStatus.WARNING
        assert result.description.startswith("3 backup(s) failed in the last 30 days.")

    def test_no_failures(self, run, mock_db):
        mock_db.fetch_value.return_value = 0
        assert run(AkeebaFailedBackupsCheck).status == HealthStatus.GOOD

    @pytest.mark.parametrize("count,status", [
        (0, HealthStatus.CRITICAL),
        (1, HealthStatus.WARNING),
        (3, HealthStatus.WARNING),
        (4, HealthStatus.GOOD),
    ])
    def test_frequency(self, run, mock_db, count, status):
        mock_db.fetch_value.return_value = count
        assert run(AkeebaFrequencyCheck).status == status
