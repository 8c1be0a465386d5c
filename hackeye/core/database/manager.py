"""
HackeyeBot - Database Manager
=============================

Shared SQLite store for baselines, guild settings, incidents and log
channels.

DESIGN:
    One connection per process, opened in WAL mode. Statements are
    serialized on that connection by a thread lock that is never held
    across an await, so it cannot stall the event loop behind a worker.
    Per-guild ordering is the worker pool's job, not the store's.
"""

import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Tuple

from hackeye.core.constants import DB_CONNECTION_TIMEOUT, SQLITE_BUSY_TIMEOUT
from hackeye.core.logger import logger

from hackeye.core.database.schema import SchemaMixin
from hackeye.core.database.baselines import BaselinesMixin
from hackeye.core.database.settings import SettingsMixin
from hackeye.core.database.incidents import IncidentsMixin
from hackeye.core.database.guilds import GuildsMixin


DATA_DIR: Path = Path("data")
DB_PATH: Path = DATA_DIR / "hackeye.db"

CONNECTION_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
    f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT}",
)


# =============================================================================
# Transactions
# =============================================================================

class StoreTransaction:
    """
    Atomic unit of work holding the statement lock until it ends.

    Usage:
        with db.transaction() as tx:
            tx.execute("INSERT OR IGNORE INTO guild_settings ...", (...))
            created = tx.rowcount > 0

    Commits on a clean exit, rolls back and re-raises otherwise.
    """

    def __init__(self, db: "DatabaseManager") -> None:
        self._db = db
        self._cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> "StoreTransaction":
        self._db._db_lock.acquire()
        try:
            conn = self._db._ensure_connection()
            conn.execute("BEGIN IMMEDIATE")
            self._cursor = conn.cursor()
        except sqlite3.Error:
            self._db._db_lock.release()
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        conn = self._db._conn
        try:
            if conn is not None:
                if exc_type is None:
                    conn.commit()
                else:
                    conn.rollback()
                    logger.warning("Store Transaction Rolled Back", [
                        ("Error Type", exc_type.__name__),
                        ("Error", str(exc_val)[:100]),
                    ])
        finally:
            self._db._db_lock.release()
        return False

    def execute(self, query: str, params: Tuple = ()) -> sqlite3.Cursor:
        self._cursor.execute(query, params)
        return self._cursor

    def fetchone(self) -> Optional[sqlite3.Row]:
        return self._cursor.fetchone()

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount


# =============================================================================
# Database Manager (Singleton)
# =============================================================================

class DatabaseManager(
    SchemaMixin,
    BaselinesMixin,
    SettingsMixin,
    IncidentsMixin,
    GuildsMixin,
):
    """
    Process-wide store. Every concern lives in its own mixin.

    Attributes:
        db_path: SQLite file path.
    """

    _instance: Optional["DatabaseManager"] = None
    _lock: threading.Lock = threading.Lock()

    def __new__(cls, db_path: Optional[Path] = None) -> "DatabaseManager":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self, db_path: Optional[Path] = None) -> None:
        if self._initialized:
            return

        self.db_path: Path = Path(db_path) if db_path else DB_PATH
        self._db_lock: threading.Lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = None

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connect()
        self._init_tables()
        self._initialized = True

        logger.tree("Incident Store Ready", [
            ("Path", str(self.db_path)),
            ("Journal", "WAL"),
            ("Baselines", str(self.count_rows("baseline_metrics"))),
            ("Incidents", str(self.count_rows("incidents"))),
        ], emoji="🗄️")

    # =========================================================================
    # Connection Management
    # =========================================================================

    def _connect(self) -> None:
        try:
            conn = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                timeout=DB_CONNECTION_TIMEOUT,
            )
            for pragma in CONNECTION_PRAGMAS:
                conn.execute(pragma)
            conn.row_factory = sqlite3.Row
        except sqlite3.Error as e:
            logger.error("Store Connection Failed", [
                ("Path", str(self.db_path)),
                ("Error", str(e)),
            ])
            raise
        self._conn = conn

    def _ensure_connection(self) -> sqlite3.Connection:
        """Reopen the connection after close()."""
        if self._conn is None:
            self._connect()
        return self._conn

    def close(self) -> None:
        with self._db_lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.info("Incident Store Closed")

    # =========================================================================
    # Statements
    # =========================================================================

    def execute(self, query: str, params: Tuple = (), commit: bool = True) -> sqlite3.Cursor:
        """
        Run one statement under the statement lock.

        Raises:
            sqlite3.Error: Propagated to the caller unchanged.
        """
        with self._db_lock:
            conn = self._ensure_connection()
            cursor = conn.execute(query, params)
            if commit:
                conn.commit()
            return cursor

    def fetchone(self, query: str, params: Tuple = ()) -> Optional[sqlite3.Row]:
        return self.execute(query, params, commit=False).fetchone()

    def fetchall(self, query: str, params: Tuple = ()) -> List[sqlite3.Row]:
        return self.execute(query, params, commit=False).fetchall()

    def count_rows(self, table: str) -> int:
        """Row count of one of the store's own tables."""
        if table not in self.TABLES:
            raise ValueError(f"Unknown table: {table}")
        row = self.fetchone(f"SELECT COUNT(*) AS n FROM {table}")
        return row["n"] if row else 0

    def transaction(self) -> StoreTransaction:
        return StoreTransaction(self)


# =============================================================================
# Global Instance
# =============================================================================

def get_db(db_path: Optional[Path] = None) -> DatabaseManager:
    """
    Get the global database manager instance.

    The path is only honoured by the first call, which opens the file.
    """
    return DatabaseManager(db_path)


__all__ = ["DatabaseManager", "StoreTransaction", "get_db", "DB_PATH", "DATA_DIR"]
