# ============================================================================
# HEALTH CHECK PLUGINS
# ============================================================================
# STATUS: Checks - Concrete health check implementations
# PURPOSE: Built-in Joomla checks plus the Akeeba Backup integration
# ============================================================================
"""
Health Check Plugins

System (PHP runtime):
- extensions: curl, dom, exif, fileinfo, gd/imagick, intl, json,
  mbstring, openssl, pdo_mysql, simplexml, zip
- php_settings: memory/time/input limits, output buffering, realpath
  cache, OPcache, PHP version and SAPI

System (host):
- server: disk space, temp/session/log directories, Apache modules, mail
- scheduler: failed and overdue Joomla scheduled tasks
- lifecycle: PHP end-of-life and server clock drift (HTTP)

Security:
- security: mailer transport encryption

Third party:
- akeeba: Akeeba Backup (own category and provider)

Import this module to register all checks:
    import health.checks
"""

# Import all check modules to trigger registration
from health.checks.extensions import (
    CurlExtensionCheck,
    DomExtensionCheck,
    ExifExtensionCheck,
    FileinfoExtensionCheck,
    GdOrImagickCheck,
    IntlExtensionCheck,
    JsonExtensionCheck,
    MbstringExtensionCheck,
    OpenSslExtensionCheck,
    PdoMysqlExtensionCheck,
    SimpleXmlExtensionCheck,
    ZipExtensionCheck,
)
from health.checks.php_settings import (
    MemoryLimitCheck,
    MaxExecutionTimeCheck,
    MaxInputTimeCheck,
    MaxInputVarsCheck,
    PostMaxSizeCheck,
    UploadMaxFilesizeCheck,
    OutputBufferingCheck,
    RealpathCacheCheck,
    OpcacheCheck,
    PhpVersionCheck,
    PhpSapiCheck,
)
from health.checks.server import (
    DiskSpaceCheck,
    TempDirectoryCheck,
    SessionSavePathCheck,
    LogFileSizeCheck,
    ApacheModulesCheck,
    MailFunctionCheck,
)
from health.checks.scheduler import FailedTasksCheck, OverdueTasksCheck
from health.checks.lifecycle import PhpEolCheck, ServerTimeCheck
from health.checks.security import MailerSecurityCheck
from health.checks.akeeba import (
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
)

__all__ = [
    # Extensions
    "CurlExtensionCheck",
    "DomExtensionCheck",
    "ExifExtensionCheck",
    "FileinfoExtensionCheck",
    "GdOrImagickCheck",
    "IntlExtensionCheck",
    "JsonExtensionCheck",
    "MbstringExtensionCheck",
    "OpenSslExtensionCheck",
    "PdoMysqlExtensionCheck",
    "SimpleXmlExtensionCheck",
    "ZipExtensionCheck",
    # PHP settings
    "MemoryLimitCheck",
    "MaxExecutionTimeCheck",
    "MaxInputTimeCheck",
    "MaxInputVarsCheck",
    "PostMaxSizeCheck",
    "UploadMaxFilesizeCheck",
    "OutputBufferingCheck",
    "RealpathCacheCheck",
    "OpcacheCheck",
    "PhpVersionCheck",
    "PhpSapiCheck",
    # Server
    "DiskSpaceCheck",
    "TempDirectoryCheck",
    "SessionSavePathCheck",
    "LogFileSizeCheck",
    "ApacheModulesCheck",
    "MailFunctionCheck",
    # Scheduler
    "FailedTasksCheck",
    "OverdueTasksCheck",
    # Lifecycle
    "PhpEolCheck",
    "ServerTimeCheck",
    # Security
    "MailerSecurityCheck",
    # Akeeba Backup
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
