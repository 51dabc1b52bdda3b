"""Connection handling for the content database."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from common.env import env
from common.logger import get_logger

from .errors import DatabaseError, DatabaseUnavailableError, IntegrityError, SchemaError

logger = get_logger(__name__)

Row = dict[str, Any]

SCHEMA_FILE = Path(__file__).parent / "schema_sqlite.sql"


class ContentDatabase:
    """One SQLite file holding `contents` and `subject_contents`.

    A connection is opened per `transaction()` block. Statements inside the
    block are committed together when it exits normally and rolled back
    when it raises.
    """

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    @classmethod
    def from_env(cls) -> "ContentDatabase":
        """Open the database at DATABASE_PATH."""
        return cls(env.database_path())

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def exists(self) -> bool:
        return str(self.db_path) == ":memory:" or self.db_path.exists()

    def _open(self) -> None:
        if str(self.db_path) != ":memory:":
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DatabaseUnavailableError(f"Cannot create {self.db_path.parent}: {e}") from e

        try:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            raise DatabaseUnavailableError(f"Cannot open {self.db_path}: {e}") from e

    def _close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @contextmanager
    def transaction(self) -> Iterator["ContentDatabase"]:
        """Open a connection for the duration of the block.

        Yields:
            This database, connected

        Raises:
            DatabaseUnavailableError: If the file cannot be opened
            DatabaseError: If the commit fails
        """
        if self._conn is not None:
            raise DatabaseError("A transaction is already open")

        self._open()
        try:
            yield self
        except Exception:
            try:
                self._conn.rollback()
            except sqlite3.Error as e:
                logger.error(f"Rollback of {self.db_path} failed: {e}")
            raise
        else:
            try:
                self._conn.commit()
            except sqlite3.Error as e:
                raise DatabaseError(f"Commit failed: {e}") from e
        finally:
            self._close()

    def _cursor(self) -> sqlite3.Cursor:
        if self._conn is None:
            raise DatabaseError("No open transaction")
        return self._conn.cursor()

    def create_schema(self) -> None:
        """Create the tables and indexes that do not exist yet."""
        cursor = self._cursor()
        try:
            script = SCHEMA_FILE.read_text(encoding="utf-8")
        except OSError as e:
            raise SchemaError(f"Cannot read {SCHEMA_FILE.name}: {e}") from e

        try:
            cursor.executescript(script)
        except sqlite3.Error as e:
            raise SchemaError(f"Failed to create schema: {e}") from e
        logger.debug(f"Schema ready in {self.db_path}")

    def table_names(self) -> list[str]:
        rows = self.fetchall(
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
        return [row["name"] for row in rows]

    def execute(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        """Run one statement.

        Raises:
            IntegrityError: If a constraint rejects the row
            DatabaseError: For any other SQLite failure
        """
        cursor = self._cursor()
        try:
            return cursor.execute(query, params)
        except sqlite3.IntegrityError as e:
            raise IntegrityError(str(e)) from e
        except sqlite3.Error as e:
            raise DatabaseError(f"Query failed: {e}") from e

    def fetchone(self, query: str, params: tuple = ()) -> Row | None:
        row = self.execute(query, params).fetchone()
        return dict(row) if row is not None else None

    def fetchall(self, query: str, params: tuple = ()) -> list[Row]:
        return [dict(row) for row in self.execute(query, params).fetchall()]

    def fetchscalar(self, query: str, params: tuple = ()) -> Any:
        row = self.execute(query, params).fetchone()
        return row[0] if row is not None else None

    def __repr__(self) -> str:
        state = "open" if self.connected else "closed"
        return f"ContentDatabase(db_path={self.db_path}, {state})"
