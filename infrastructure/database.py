# ============================================================================
# JOOMLA DATABASE ACCESS
# ============================================================================
# STATUS: Infrastructure - Read-only access to the site database
# PURPOSE: Scalar and column queries against MySQL/MariaDB or PostgreSQL
# ============================================================================
"""
Joomla Database Access

Joomla runs on MySQL/MariaDB (mysqli, pdomysql) or PostgreSQL (pgsql).
Checks only ever read single values, so the surface is small:

    fetch_value(query, params)   - first column of the first row
    fetch_column(query, params)  - first column of every row
    table_exists(table)          - table lookup in the current schema

Queries use Joomla's "#__" table prefix placeholder, replaced with the
site prefix before execution. Both drivers use the %s paramstyle.

Usage:
    db = JoomlaDatabase("mysql://joomla:secret@db/joomla", prefix="jos_")
    count = db.fetch_value("SELECT COUNT(*) FROM #__scheduler_tasks")
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, List, Optional, Sequence
from urllib.parse import parse_qs, unquote, urlparse

import psycopg
import pymysql
from psycopg_pool import ConnectionPool

from core.config import DatabaseDefaults
from core.contracts import DatabaseDriver
from core.models import SiteConfiguration

logger = logging.getLogger(__name__)

PREFIX_PLACEHOLDER = "#__"

_URL_SCHEMES = {
    "mysql": DatabaseDriver.MYSQL,
    "mysql+pymysql": DatabaseDriver.MYSQL,
    "mariadb": DatabaseDriver.MYSQL,
    "postgresql": DatabaseDriver.POSTGRESQL,
    "postgres": DatabaseDriver.POSTGRESQL,
}

_TABLE_EXISTS_SQL = {
    DatabaseDriver.MYSQL: (
        "SELECT COUNT(*) FROM information_schema.tables "
        "WHERE table_schema = DATABASE() AND table_name = %s"
    ),
    DatabaseDriver.POSTGRESQL: (
        "SELECT COUNT(*) FROM information_schema.tables "
        "WHERE table_schema = current_schema() AND table_name = %s"
    ),
}


class JoomlaDatabase:
    """
    Read-only handle on a Joomla site database.

    PostgreSQL connections come from a psycopg_pool pool opened on first
    use. MySQL connections are opened per query with PyMySQL.
    """

    def __init__(
        self,
        url: str,
        prefix: str = "jos_",
        pool_min_size: int = 1,
        pool_max_size: int = 4,
        connect_timeout: int = 10,
    ):
        scheme = urlparse(url).scheme.lower()
        if scheme not in _URL_SCHEMES:
            raise ValueError(f"Unsupported database URL scheme: {scheme or '(none)'}")

        self.url = url
        self.dialect = _URL_SCHEMES[scheme]
        self.prefix = prefix
        self.pool_min_size = pool_min_size
        self.pool_max_size = pool_max_size
        self.connect_timeout = connect_timeout

        self._pool: Optional[ConnectionPool] = None
        self._pool_lock = threading.Lock()

    @classmethod
    def from_site(
        cls,
        site: SiteConfiguration,
        defaults: Optional[DatabaseDefaults] = None,
    ) -> "JoomlaDatabase":
        """
        Build a handle from configuration.php values.

        DATABASE_URL and JOOMLA_DB_PREFIX (via DatabaseDefaults) take
        precedence over the site configuration.
        """
        defaults = defaults or DatabaseDefaults()
        return cls(
            url=defaults.url or site.database_url(),
            prefix=defaults.prefix or site.dbprefix,
            pool_min_size=defaults.pool_min_size,
            pool_max_size=defaults.pool_max_size,
        )

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def replace_prefix(self, query: str) -> str:
        """Replace the #__ placeholder with the site table prefix."""
        return query.replace(PREFIX_PLACEHOLDER, self.prefix)

    def fetch_value(self, query: str, params: Optional[Sequence[Any]] = None) -> Any:
        """Return the first column of the first row, or None."""
        rows = self._execute(query, params)
        if not rows:
            return None
        return rows[0][0]

    def fetch_column(self, query: str, params: Optional[Sequence[Any]] = None) -> List[Any]:
        """Return the first column of every row."""
        return [row[0] for row in self._execute(query, params)]

    def table_exists(self, table: str) -> bool:
        """Check whether a (#__ prefixed) table exists in the current schema."""
        name = self.replace_prefix(table)
        count = self.fetch_value(_TABLE_EXISTS_SQL[self.dialect], (name,))
        return bool(count)

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def _execute(self, query: str, params: Optional[Sequence[Any]]) -> list:
        sql = self.replace_prefix(query)
        logger.debug(f"Executing query ({self.dialect.value}): {sql}")

        if self.dialect == DatabaseDriver.POSTGRESQL:
            try:
                with self._get_pool().connection() as conn:
                    with conn.cursor() as cur:
                        cur.execute(sql, params)
                        return cur.fetchall()
            except psycopg.Error as e:
                logger.error(f"PostgreSQL error: {e}")
                raise

        with self._mysql_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return list(cur.fetchall())

    def _get_pool(self) -> ConnectionPool:
        if self._pool is None:
            with self._pool_lock:
                if self._pool is None:
                    logger.debug("Opening PostgreSQL connection pool...")
                    self._pool = ConnectionPool(
                        conninfo=self.url,
                        min_size=self.pool_min_size,
                        max_size=self.pool_max_size,
                        kwargs={"connect_timeout": self.connect_timeout},
                        open=True,
                    )
        return self._pool

    @contextmanager
    def _mysql_connection(self):
        parsed = urlparse(self.url)
        options = parse_qs(parsed.query)

        connect_args = {
            "host": parsed.hostname or "localhost",
            "user": unquote(parsed.username or ""),
            "password": unquote(parsed.password or ""),
            "database": unquote(parsed.path.lstrip("/")) or None,
            "charset": "utf8mb4",
            "connect_timeout": self.connect_timeout,
        }
        if parsed.port:
            connect_args["port"] = parsed.port
        if "unix_socket" in options:
            connect_args["unix_socket"] = options["unix_socket"][0]

        conn = None
        try:
            conn = pymysql.connect(**connect_args)
            yield conn
        except pymysql.MySQLError as e:
            logger.error(f"MySQL error: {e}")
            raise
        finally:
            if conn is not None:
                conn.close()

    def close(self) -> None:
        """Close the PostgreSQL pool, if one was opened."""
        if self._pool is not None:
            self._pool.close()
            self._pool = None

    def __repr__(self) -> str:
        return f"JoomlaDatabase(dialect={self.dialect.value}, prefix={self.prefix!r})"


# ============================================================================
# SHARED INSTANCE
# ============================================================================

_database: Optional[JoomlaDatabase] = None
_database_lock = threading.Lock()


def get_database(
    site: SiteConfiguration,
    defaults: Optional[DatabaseDefaults] = None,
) -> JoomlaDatabase:
    """Get the shared database handle, creating it from the site configuration."""
    global _database
    if _database is None:
        with _database_lock:
            if _database is None:
                _database = JoomlaDatabase.from_site(site, defaults)
    return _database


def close_database() -> None:
    """Close and forget the shared database handle."""
    global _database
    with _database_lock:
        if _database is not None:
            _database.close()
            _database = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "JoomlaDatabase",
    "PREFIX_PLACEHOLDER",
    "get_database",
    "close_database",
]
