import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Protocol, runtime_checkable

from sealbid.utils.logger import get_logger

logger = get_logger("storage.kv")


@runtime_checkable
class KVStore(Protocol):
    """Ledger contract: opaque byte values keyed by string."""

    def get(self, key: str) -> Optional[bytes]: ...

    def put(self, key: str, value: bytes) -> None: ...

    def delete(self, key: str) -> None: ...


@runtime_checkable
class KeyListing(Protocol):
    """Optional ledger capability: enumerate stored keys."""

    def keys(self, prefix: str = "") -> List[str]: ...


@runtime_checkable
class Transactional(Protocol):
    """Optional ledger capability: make a get-then-put sequence atomic."""

    def transaction(self): ...


class InMemoryKVStore:
    """Dict-backed ledger for tests and demos."""

    def __init__(self):
        self._data: Dict[str, bytes] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def put(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Serialize read-modify-write sequences across threads."""
        with self._lock:
            yield

    def __len__(self) -> int:
        return len(self._data)


class SQLiteKVStore:
    """
    SQLite backend for the ledger.
    
    One table, kv_store(key TEXT PRIMARY KEY, value BLOB). Outside a
    transaction() block each put and delete commits on its own. Inside
    one, the database write lock is taken up front (BEGIN IMMEDIATE), so
    two processes updating the same asset are serialized instead of one
    overwriting the other's change.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._conn_local = threading.local()
        
        # Ensure directory exists
        if not self.db_path.parent.exists():
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            
        self._init_schema()
        logger.debug(f"SQLite ledger opened at {self.db_path}")

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create connection for current thread."""
        if not hasattr(self._conn_local, "conn"):
            self._conn_local.conn = sqlite3.connect(
                self.db_path,
                timeout=30.0,
                check_same_thread=False
            )
            self._conn_local.conn.row_factory = sqlite3.Row
            # Enable WAL mode for better concurrency
            self._conn_local.conn.execute("PRAGMA journal_mode=WAL;")
            self._conn_local.conn.execute("PRAGMA synchronous=NORMAL;")
        return self._conn_local.conn

    def _init_schema(self):
        """Initialize database schema."""
        conn = self._get_conn()
        with conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value BLOB NOT NULL
                )
            """)

    # =========================================================================
    # Key-Value Operations
    # =========================================================================

    def _write(self, sql: str, params: tuple) -> None:
        conn = self._get_conn()
        if getattr(self._conn_local, "in_transaction", False):
            # Committed when the enclosing transaction() exits
            conn.execute(sql, params)
            return
        with conn:
            conn.execute(sql, params)

    def put(self, key: str, value: bytes) -> None:
        """Save a key-value pair."""
        self._write(
            "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
            (key, bytes(value))
        )

    def get(self, key: str) -> Optional[bytes]:
        """Get value by key."""
        conn = self._get_conn()
        cursor = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = cursor.fetchone()
        return bytes(row['value']) if row else None

    def delete(self, key: str) -> None:
        """Remove a key (no-op if absent)."""
        self._write("DELETE FROM kv_store WHERE key = ?", (key,))

    def keys(self, prefix: str = "") -> List[str]:
        """All keys starting with prefix, sorted."""
        conn = self._get_conn()
        cursor = conn.execute("SELECT key FROM kv_store ORDER BY key")
        return [row['key'] for row in cursor.fetchall() if row['key'].startswith(prefix)]

    # =========================================================================
    # Transactions
    # =========================================================================

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """
        Run the enclosed gets and puts as one SQLite transaction.
        
        Commits on normal exit and rolls back if the block raises. Nested
        blocks join the outer transaction.
        """
        if getattr(self._conn_local, "in_transaction", False):
            yield
            return

        conn = self._get_conn()
        conn.execute("BEGIN IMMEDIATE")
        self._conn_local.in_transaction = True
        try:
            yield
        except BaseException:
            conn.rollback()
            raise
        else:
            conn.commit()
        finally:
            self._conn_local.in_transaction = False

    def close(self) -> None:
        """Close this thread's connection."""
        conn = getattr(self._conn_local, "conn", None)
        if conn is not None:
            conn.close()
            del self._conn_local.conn
