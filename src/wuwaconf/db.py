"""In-memory SQLite store opened from raw database bytes.

The store never touches the filesystem: bytes go in through
`sqlite3.Connection.deserialize` and come back out through `serialize`.
Callers get a narrow read/write/export surface and nothing else.

Usage:
    with open_store(data) as store:
        rows = store.exec_read('SELECT Key, Value FROM LocalStorage')
        store.exec_write('UPDATE LocalStorage SET Value = ? WHERE Key = ?',
                         ('120', 'CustomFrameRate'))
        patched = store.export_bytes()
"""

import sqlite3
from contextlib import contextmanager

from .constants import (
    SQLITE_HEADER_MAGIC, SQLITE_HEADER_SIZE,
    SQLITE_WRITE_VERSION_OFFSET, SQLITE_READ_VERSION_OFFSET,
    SQLITE_VERSION_LEGACY, SQLITE_VERSION_WAL,
)


class OpenError(Exception):
    """Input bytes are not a readable SQLite database."""


def _rollback_journal_copy(data: bytes) -> bytearray:
    """Return a private copy of `data` with a WAL header set back to legacy.

    A WAL-mode database cannot be read from a memory image, so the copy
    claims rollback-journal mode instead. Nothing else in the image changes.
    """
    buf = bytearray(data)
    if len(buf) >= SQLITE_HEADER_SIZE and buf.startswith(SQLITE_HEADER_MAGIC):
        for offset in (SQLITE_WRITE_VERSION_OFFSET, SQLITE_READ_VERSION_OFFSET):
            if buf[offset] == SQLITE_VERSION_WAL:
                buf[offset] = SQLITE_VERSION_LEGACY
    return buf


class Store:
    """A SQLite database held entirely in memory.

    Owns its connection for its lifetime; close it (or use it as a context
    manager) when done.
    """

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @property
    def closed(self) -> bool:
        return self._conn is None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise sqlite3.ProgrammingError('Store is closed')
        return self._conn

    def exec_read(self, query: str, params: tuple = ()) -> list[tuple]:
        """Run a read-only query and return all rows in order."""
        return self._connection().execute(query, params).fetchall()

    def exec_write(self, statement: str, params: tuple = ()) -> int:
        """Run a parameterized mutation. Returns the affected row count."""
        cur = self._connection().execute(statement, params)
        return cur.rowcount

    @contextmanager
    def transaction(self):
        """Group several writes into one unit; roll back if any fails."""
        conn = self._connection()
        conn.execute('BEGIN')
        try:
            yield self
        except BaseException:
            conn.execute('ROLLBACK')
            raise
        conn.execute('COMMIT')

    def table_names(self) -> list[str]:
        rows = self.exec_read(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY rowid")
        return [name for (name,) in rows]

    def column_names(self, table: str) -> list[str]:
        # PRAGMA arguments cannot be bound; table_info only accepts an
        # identifier, so quote it as one.
        quoted = '"' + table.replace('"', '""') + '"'
        rows = self.exec_read(f'PRAGMA table_info({quoted})')
        return [row[1] for row in rows]

    def export_bytes(self) -> bytes:
        """Serialize the current database state."""
        return bytes(self._connection().serialize())


def open_store(data: bytes) -> Store:
    """Open database bytes as an in-memory Store.

    Raises OpenError when the bytes are not a well-formed SQLite database
    (bad header, truncated pages). The caller's buffer is copied, never
    modified.
    """
    conn = sqlite3.connect(':memory:', isolation_level=None)
    try:
        conn.deserialize(_rollback_journal_copy(data))
        result = conn.execute('PRAGMA quick_check').fetchall()
    except (sqlite3.Error, TypeError, OverflowError, MemoryError) as e:
        conn.close()
        detail = str(e) or 'not a SQLite database'
        raise OpenError(f'Failed to open database: {detail}') from e
    if not result or result[0][0] != 'ok':
        conn.close()
        detail = result[0][0] if result else 'no integrity result'
        raise OpenError(f'Failed to open database: {detail}')
    return Store(conn)
