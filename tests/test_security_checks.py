# ============================================================================
# SECURITY CHECK TESTS
# ============================================================================
# STATUS: Tests - Mailer transport security
# PURPOSE: Verify SMTP encryption detection
# ============================================================================
"""
Security Check Tests

Run with:
    pytest tests/test_security_checks.py -v
"""

import pytest

from core.models import SiteConfiguration
from health.checks.security import MailerSecurityCheck
from health.core import HealthCheckContext, HealthStatus


class TestMailerSecurity:

    @pytest.mark.parametrize("mailer,smtpsecure,status,description", [
        ("smtp", "none", HealthStatus.WARNING,
         "SMTP is configured without encryption. Consider using TLS or SSL."),
        ("smtp", "", HealthStatus.WARNING,
         "SMTP is configured without encryption. Consider using TLS or SSL."),
        ("smtp", "tls", HealthStatus.GOOD, "SMTP is configured with TLS encryption."),
        ("smtp", "ssl", HealthStatus.GOOD, "SMTP is configured with SSL encryption."),
        ("mail", "none", HealthStatus.GOOD, "Using PHP mail() function."),
        ("sendmail", "none", HealthStatus.GOOD, "Using sendmail for email delivery."),
        ("mailgun", "none", HealthStatus.GOOD, "Mail is configured using: mailgun"),
    ])
    def test_mailers(self, make_context, mailer, smtpsecure, status, description):
        site = SiteConfiguration(mailer=mailer, smtpsecure=smtpsecure)
        result = MailerSecurityCheck(make_context(site=site)).run()

        assert result.status == status
        assert result.description == description
        assert result.category == "security"

    def test_no_site_configuration(self):
        result = MailerSecurityCheck(HealthCheckContext()).run()
        assert result.status == HealthStatus.WARNING
