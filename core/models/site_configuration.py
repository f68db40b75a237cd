# ============================================================================
# SITE CONFIGURATION MODEL
# ============================================================================
# STATUS: Domain model - Joomla global configuration
# PURPOSE: Typed view of the JConfig values the checks depend on
# ============================================================================
"""
Site Configuration Model

Joomla stores its global configuration as public properties of the
JConfig class in configuration.php. Only the values read by checks
are modelled; everything else is kept in `extra`.
"""

import os
from typing import Any, Dict, Optional
from urllib.parse import quote

from pydantic import BaseModel, Field

from core.contracts import DatabaseDriver


class SiteConfiguration(BaseModel):
    """Subset of Joomla's JConfig."""

    # Mail
    mailer: str = "mail"
    sendmail: str = "/usr/sbin/sendmail"
    smtpsecure: str = "none"

    # Paths
    tmp_path: Optional[str] = None
    log_path: Optional[str] = None

    # Database
    dbtype: str = "mysqli"
    host: str = "localhost"
    user: str = ""
    password: str = ""
    db: str = ""
    dbprefix: str = "jos_"

    extra: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def resolve_tmp_path(self, site_root: str) -> str:
        """Configured temp path, defaulting to <root>/tmp."""
        return self.tmp_path or os.path.join(site_root, "tmp")

    def resolve_log_path(self, site_root: str) -> str:
        """Configured log path, defaulting to <root>/administrator/logs."""
        return self.log_path or os.path.join(site_root, "administrator", "logs")

    def database_url(self) -> str:
        """
        Build a database URL from the JConfig database settings.

        Joomla's $host may carry a port ("db:3307") or a unix socket
        ("localhost:/run/mysqld/mysqld.sock"); the socket form is passed
        as a query parameter.
        """
        driver = DatabaseDriver.from_joomla(self.dbtype)
        host, _, port = self.host.partition(":")
        credentials = quote(self.user, safe="")
        if self.password:
            credentials += ":" + quote(self.password, safe="")

        query = ""
        if port.startswith("/"):
            query = "?unix_socket=" + quote(port, safe="/")
            port = ""

        netloc = f"{credentials}@{host or 'localhost'}"
        if port:
            netloc += f":{port}"

        return f"{driver.value}://{netloc}/{quote(self.db, safe='')}{query}"


__all__ = ["SiteConfiguration"]
