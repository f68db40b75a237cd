# ============================================================================
# SECURITY CHECKS
# ============================================================================
# STATUS: Checks - Security-related configuration
# PURPOSE: Mail transport encryption
# ============================================================================
"""
Security Checks

- mailer_security: SMTP without TLS/SSL sends credentials in clear text
"""

import logging

from core.contracts import MailerType
from health.core import HealthCheckPlugin, HealthCheckResult
from health.registry import register_check

logger = logging.getLogger(__name__)


@register_check(category="security")
class MailerSecurityCheck(HealthCheckPlugin):
    slug = "security.mailer_security"
    title = "Mailer Security"

    def perform_check(self) -> HealthCheckResult:
        site = self.require_site()
        mailer = site.mailer
        smtp_secure = site.smtpsecure

        if mailer == MailerType.SMTP.value:
            if not smtp_secure or smtp_secure == "none":
                return self.warning(
                    "SMTP is configured without encryption. Consider using TLS or SSL."
                )
            return self.good(f"SMTP is configured with {smtp_secure.upper()} encryption.")

        if mailer == MailerType.MAIL.value:
            return self.good("Using PHP mail() function.")

        if mailer == MailerType.SENDMAIL.value:
            return self.good("Using sendmail for email delivery.")

        return self.good(f"Mail is configured using: {mailer}")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MailerSecurityCheck",
]
