"""Core database base class with connection management and schema initialization."""

import logging
import os
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, cast

from bookmark_ai.db.models import BOOKMARK_AI_DB_PATH
from bookmark_ai.db.schema import CURRENT_SCHEMA_VERSION, EXPECTED_INDICES, SCHEMA_SQL

logger = logging.getLogger(__name__)


# (from_version, callable), applied in order to existing databases.
_MIGRATIONS: list[tuple[int, Any]] = []


class BookmarkDBBase:
    """Base class for the Bookmark AI database with connection management and schema init.

    Each thread gets its own connection; all of them are tracked so ``close``
    can shut every one down.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        """Initialize database manager.

        Args:
            db_path: Path to database file. Uses default if None.
        """
        self.db_path = Path(db_path) if db_path else BOOKMARK_AI_DB_PATH
        self._local = threading.local()
        self._ensure_directory()

        self._all_connections: set[sqlite3.Connection] = set()
        self._connections_lock = threading.Lock()

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create a thread-local connection.

        Returns:
            SQLite connection with row_factory set to sqlite3.Row.
        """
        if getattr(self._local, "connection", None) is None:
            conn = sqlite3.connect(
                str(self.db_path),
                detect_types=sqlite3.PARSE_DECLTYPES,
                timeout=30.0,
                check_same_thread=False,
            )
            conn.row_factory = sqlite3.Row
            # Cascading deletes depend on this
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute("PRAGMA journal_mode = WAL")
            conn.execute("PRAGMA synchronous = NORMAL")
            self._local.connection = conn

            with self._connections_lock:
                self._all_connections.add(conn)
        return cast(sqlite3.Connection, self._local.connection)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection (reuses thread-local connection).

        Commits on success, rolls back on any exception. Nested blocks on the
        same thread join the outermost one, so a group of writes wrapped in a
        single block lands or rolls back as a unit.

        Yields:
            SQLite connection with row_factory set to sqlite3.Row.
        """
        conn = self._get_connection()
        depth = getattr(self._local, "depth", 0)
        self._local.depth = depth + 1
        try:
            yield conn
            if depth == 0:
                conn.commit()
        except Exception:
            if depth == 0:
                conn.rollback()
            raise
        finally:
            self._local.depth = depth

    def close(self) -> None:
        """Close all thread-local connections."""
        with self._connections_lock:
            for conn in self._all_connections:
                try:
                    conn.close()
                except sqlite3.Error as e:
                    logger.debug("Error closing db connection: %s", e)
            self._all_connections.clear()

        if hasattr(self._local, "connection"):
            self._local.connection = None

    def _restrict_permissions(self) -> None:
        # Integration credentials live in users.settings_json.
        try:
            os.chmod(self.db_path, 0o600)
        except OSError as e:
            logger.warning("Could not restrict permissions on %s: %s", self.db_path, e)

    def init_schema(self) -> bool:
        """Initialize database schema.

        Creates all tables if they don't exist and migrates older databases.

        Returns:
            True if schema was created/updated, False if already current.
        """
        with self.connection() as conn:
            try:
                cursor = conn.execute(
                    "SELECT version FROM schema_version ORDER BY version DESC LIMIT 1"
                )
                row = cursor.fetchone()
                current_version = row["version"] if row else 0
            except sqlite3.OperationalError:
                # Table doesn't exist yet
                current_version = 0

            if current_version >= CURRENT_SCHEMA_VERSION:
                conn.executescript(SCHEMA_SQL)
                logger.debug("Schema already at version %d", current_version)
                return False

            # New databases get the latest columns straight from SCHEMA_SQL.
            if current_version > 0:
                for from_version, migrate_fn in _MIGRATIONS:
                    if current_version <= from_version:
                        migrate_fn(conn)

            conn.executescript(SCHEMA_SQL)
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (CURRENT_SCHEMA_VERSION,),
            )

            logger.info(
                "Schema updated from version %d to %d",
                current_version,
                CURRENT_SCHEMA_VERSION,
            )

        self._restrict_permissions()
        return True

    def exists(self) -> bool:
        """Check if the database file exists."""
        return self.db_path.exists()

    def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            with self.connection() as conn:
                conn.execute("SELECT 1").fetchone()
            return True
        except sqlite3.Error as e:
            logger.warning("Database ping failed: %s", e)
            return False

    def verify_indices(self) -> dict[str, Any]:
        """Report which expected indices exist.

        Returns:
            Dictionary with ``existing``, ``missing`` and ``all_present`` keys.
        """
        with self.connection() as conn:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='index' AND name LIKE 'idx_%'"
            )
            existing = {row["name"] for row in cursor}
        missing = EXPECTED_INDICES - existing
        return {"existing": existing, "missing": missing, "all_present": not missing}
