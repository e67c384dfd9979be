# Area: Session
"""
trap_grid._session.database — Database Initialization
=====================================================

Handles SQLite database initialization and connection management
for session state persistence.

Connections run in autocommit mode; multi-statement work goes through
``transaction()``, which takes the write lock up front with
``BEGIN IMMEDIATE`` so every check-then-set is one atomic unit.
"""

import sqlite3
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger("trap_grid.session.database")

# Path to schema file
SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def get_connection(db_path: str = "trap_grid.db") -> sqlite3.Connection:
    """
    Get a database connection.

    Args:
        db_path: Path to the SQLite database file

    Returns:
        SQLite connection with row factory set, in autocommit mode
    """
    conn = sqlite3.connect(db_path, isolation_level=None, timeout=30)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_database(db_path: str = "trap_grid.db") -> None:
    """
    Initialize the database with schema.

    Args:
        db_path: Path to the SQLite database file
    """
    conn = get_connection(db_path)
    try:
        with open(SCHEMA_PATH, "r") as f:
            schema = f.read()
        conn.executescript(schema)
        logger.info(f"Database initialized at {db_path}")
    finally:
        conn.close()


@contextmanager
def transaction(db_path: str) -> Iterator[sqlite3.Connection]:
    """
    Run a block as one serializable write transaction.

    Commits on normal exit, rolls back if the block raises.
    """
    conn = get_connection(db_path)
    try:
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")
    finally:
        conn.close()


class BaseRepository:
    """
    Base class for database repositories.

    Provides common database operations and connection management.
    Every helper accepts an optional connection so repositories can
    join a caller's transaction.
    """

    def __init__(self, db_path: str = "trap_grid.db"):
        """
        Initialize repository.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path

    def transaction(self):
        """Open a write transaction on this repository's database."""
        return transaction(self.db_path)

    def _execute(
        self,
        query: str,
        params: tuple = (),
        fetch: bool = False,
        conn: Optional[sqlite3.Connection] = None,
    ) -> Optional[list]:
        """
        Execute a query.

        Args:
            query: SQL query string
            params: Query parameters
            fetch: If True, fetch and return results
            conn: Connection of an open transaction, if any

        Returns:
            Query results if fetch=True, else None
        """
        if conn is not None:
            cursor = conn.execute(query, params)
            return [dict(row) for row in cursor.fetchall()] if fetch else None

        own = get_connection(self.db_path)
        try:
            cursor = own.execute(query, params)
            if fetch:
                return [dict(row) for row in cursor.fetchall()]
            return None
        finally:
            own.close()

    def _execute_one(
        self, query: str, params: tuple = (), conn: Optional[sqlite3.Connection] = None
    ) -> Optional[dict]:
        """Execute query and return single result."""
        results = self._execute(query, params, fetch=True, conn=conn)
        return results[0] if results else None

    def _execute_count(self, query: str, params: tuple, conn: sqlite3.Connection) -> int:
        """Execute a write inside a transaction and return affected rows."""
        return conn.execute(query, params).rowcount
