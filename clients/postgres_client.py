"""
PostgreSQL access for the invoice app.

psycopg2 ThreadedConnectionPool, one pool per database URL shared by every
client on that URL. UUIDs are adapted natively in both directions, so ids
go in and come out as uuid.UUID. A statement that raises leaves nothing
behind: its transaction is rolled back before the connection is returned.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Tuple

import psycopg2
import psycopg2.extras
import psycopg2.pool

logger = logging.getLogger(__name__)

Params = Tuple | Dict | None

_uuid_registered = False


class PostgresClient:
    """
    Pooled PostgreSQL client returning rows as plain dicts.

    Usage:
        db = PostgresClient(database_url)

        rows = db.execute("SELECT * FROM invoices ORDER BY date DESC")
        row = db.execute_single("SELECT * FROM invoices WHERE id = %s", (invoice_id,))
        ids = db.execute_returning("INSERT ... RETURNING id", params)
    """

    MIN_CONNECTIONS = 2
    MAX_CONNECTIONS = 20

    _pools: Dict[str, psycopg2.pool.ThreadedConnectionPool] = {}
    _pools_lock = threading.RLock()

    def __init__(self, database_url: str):
        self._database_url = database_url
        self._pool()

    def _pool(self) -> psycopg2.pool.ThreadedConnectionPool:
        global _uuid_registered
        with self._pools_lock:
            pool = self._pools.get(self._database_url)
            if pool is None:
                if not _uuid_registered:
                    psycopg2.extras.register_uuid()
                    _uuid_registered = True
                pool = psycopg2.pool.ThreadedConnectionPool(
                    minconn=self.MIN_CONNECTIONS,
                    maxconn=self.MAX_CONNECTIONS,
                    dsn=self._database_url,
                    connect_timeout=30,
                )
                self._pools[self._database_url] = pool
                logger.info("Connection pool created")
            return pool

    @contextmanager
    def get_connection(self) -> Iterator[Any]:
        """Borrow a pooled connection. Anything left uncommitted is rolled back."""
        pool = self._pool()
        conn = pool.getconn()
        if conn is None:
            raise RuntimeError("Could not get connection from pool")
        try:
            yield conn
        finally:
            if not conn.closed:
                conn.rollback()
            pool.putconn(conn)

    @contextmanager
    def _cursor(self) -> Iterator[psycopg2.extras.RealDictCursor]:
        """Dict cursor in its own transaction, committed if the block completes."""
        with self.get_connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                yield cur
            conn.commit()

    def execute(self, query: str, params: Params = None) -> List[Dict[str, Any]]:
        """Run a statement. Returns its rows, or [] for statements without a result set."""
        with self._cursor() as cur:
            cur.execute(query, params)
            if cur.description is None:
                return []
            return [dict(row) for row in cur.fetchall()]

    def execute_single(self, query: str, params: Params = None) -> Dict[str, Any] | None:
        """First row or None."""
        rows = self.execute(query, params)
        return rows[0] if rows else None

    def execute_returning(self, query: str, params: Params = None) -> List[Dict[str, Any]]:
        """
        Run INSERT/UPDATE/DELETE ... RETURNING and return the affected rows.

        An empty list means no row was touched (e.g. ON CONFLICT DO NOTHING).
        """
        with self._cursor() as cur:
            cur.execute(query, params)
            return [dict(row) for row in cur.fetchall()]

    def close(self) -> None:
        """Close this URL's pool."""
        with self._pools_lock:
            pool = self._pools.pop(self._database_url, None)
            if pool is not None:
                pool.closeall()
