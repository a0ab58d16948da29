from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import UndoRequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import UndoRequest
from .repository import UndoRequestRepository

_COLUMNS = """
    id, shareholder_id, shareholder_name, requested_by, requested_at,
    status, approved_by, approved_at, reason
"""


def _row_to_request(r: dict) -> UndoRequest:
    return UndoRequest(
        id=int(r["id"]),
        shareholder_id=str(r["shareholder_id"]),
        shareholder_name=r["shareholder_name"],
        requested_by=r["requested_by"],
        requested_at=r["requested_at"],
        status=UndoRequestStatus(r["status"]),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        reason=r.get("reason"),
    )


class MySQLUndoRequestRepository(UndoRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, shareholder_id: str, shareholder_name: str, requested_by: str, reason: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO undo_requests(shareholder_id, shareholder_name, requested_by, reason, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (shareholder_id, shareholder_name, requested_by, reason, UndoRequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[UndoRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM undo_requests WHERE id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def list_by_status(self, *, status: Optional[UndoRequestStatus] = None) -> Sequence[UndoRequest]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM undo_requests WHERE {' AND '.join(clauses)} ORDER BY requested_at DESC, id DESC",
                tuple(params),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: UndoRequestStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE undo_requests
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE id=%s AND status=%s
                """,
                (status.value, decided_by, decided_at, int(request_id), UndoRequestStatus.PENDING.value),
            )
            return cur.rowcount > 0
