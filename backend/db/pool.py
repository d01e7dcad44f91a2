"""
db/pool.py
-----------
Process-wide psycopg2 ThreadedConnectionPool for the Postgres stores.

    from db.pool import get_conn

    with get_conn() as conn:          # one transaction
        connection_repo.get_connection(conn, connection_id)

Connection settings come from the POSTGRES_* values in config.py; the same
settings are used by scripts/run_migrations.py via connect_kwargs().
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator

import psycopg2
import psycopg2.extensions
import psycopg2.pool

import config

logger = logging.getLogger(__name__)

_pool: psycopg2.pool.ThreadedConnectionPool | None = None
_pool_lock = threading.Lock()


def connect_kwargs() -> dict[str, Any]:
    """Keyword arguments for psycopg2.connect built from config."""
    return {
        "host":     config.POSTGRES_HOST,
        "port":     config.POSTGRES_PORT,
        "dbname":   config.POSTGRES_DB,
        "user":     config.POSTGRES_USER,
        "password": config.POSTGRES_PASSWORD,
    }


def get_pool() -> psycopg2.pool.ThreadedConnectionPool:
    """Return the shared pool, opening it on first use."""
    global _pool
    with _pool_lock:
        if _pool is None or _pool.closed:
            logger.info(
                "opening postgres pool %s@%s:%s/%s (%d-%d connections)",
                config.POSTGRES_USER, config.POSTGRES_HOST, config.POSTGRES_PORT,
                config.POSTGRES_DB, config.POSTGRES_MIN_CONN, config.POSTGRES_MAX_CONN,
            )
            _pool = psycopg2.pool.ThreadedConnectionPool(
                config.POSTGRES_MIN_CONN,
                config.POSTGRES_MAX_CONN,
                **connect_kwargs(),
            )
        return _pool


@contextmanager
def get_conn() -> Iterator[psycopg2.extensions.connection]:
    """
    Borrow a pooled connection for one transaction.

    Commits when the block exits cleanly and rolls back when it raises.
    A connection the server dropped mid-transaction is discarded instead of
    going back to the pool.
    """
    pool = get_pool()
    conn = pool.getconn()
    try:
        yield conn
        conn.commit()
    except Exception:
        if not conn.closed:
            conn.rollback()
        raise
    finally:
        pool.putconn(conn, close=bool(conn.closed))


def ping() -> bool:
    """True when a pooled connection can run ``SELECT 1``."""
    try:
        with get_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
                return cur.fetchone() == (1,)
    except psycopg2.Error as exc:
        logger.warning("postgres ping failed: %s", exc)
        return False


def close_pool() -> None:
    """Close every pooled connection (application shutdown)."""
    global _pool
    with _pool_lock:
        if _pool is not None and not _pool.closed:
            _pool.closeall()
            logger.info("postgres pool closed")
        _pool = None
