from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def query(conn_factory: DatabaseConnection, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """Run a parameterized statement and return every row it produces."""

    with db_cursor(conn_factory) as (_, cur):
        cur.execute(sql, tuple(params))
        if cur.description is None:
            return []
        return fetchall(cur)


def query_one(conn_factory: DatabaseConnection, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
    """Run a parameterized statement and return its first row, if any."""

    rows = query(conn_factory, sql, params)
    return rows[0] if rows else None


def execute(conn_factory: DatabaseConnection, sql: str, params: Sequence[Any] = ()) -> int:
    """Run a write statement; returns the affected row count."""

    with db_cursor(conn_factory) as (_, cur):
        cur.execute(sql, tuple(params))
        return int(cur.rowcount)
