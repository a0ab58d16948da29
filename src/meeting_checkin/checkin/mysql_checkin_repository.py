from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, query_one
from .model import MeetingCounters, Signature
from .repository import CheckInRepository


def _meeting_pk(meeting_id: Optional[str]) -> Optional[int]:
    if meeting_id is None or not str(meeting_id).strip().isdigit():
        return None
    return int(meeting_id)


class MySQLCheckInRepository(CheckInRepository):
    """Check-in writes.

    Each state change updates the properties, the shareholder row and the
    meeting counter on a single connection, so they commit together.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def property_counts(self, shareholder_id: str) -> tuple[int, int]:
        r = query_one(
            self._conn_factory,
            """
            SELECT COUNT(*) AS total,
                   COALESCE(SUM(CASE WHEN checked_in THEN 1 ELSE 0 END), 0) AS checked_in
            FROM properties
            WHERE shareholder_id=%s
            """,
            (shareholder_id,),
        )
        if not r:
            return 0, 0
        return int(r["total"]), int(r["checked_in"])

    def meeting_id_for(self, shareholder_id: str) -> Optional[str]:
        r = query_one(
            self._conn_factory,
            "SELECT meeting_id FROM shareholders WHERE shareholder_id=%s",
            (shareholder_id,),
        )
        return r.get("meeting_id") if r else None

    def mark_checked_in(
        self,
        shareholder_id: str,
        *,
        checked_in_at: datetime,
        signature: Optional[Signature],
    ) -> int:
        meeting_pk = _meeting_pk(self.meeting_id_for(shareholder_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE properties SET checked_in=TRUE WHERE shareholder_id=%s AND checked_in=FALSE",
                (shareholder_id,),
            )
            updated = int(cur.rowcount)

            cur.execute(
                """
                UPDATE shareholders
                SET checked_in_at=%s,
                    signature_image=COALESCE(%s, signature_image),
                    signature_hash=COALESCE(%s, signature_hash)
                WHERE shareholder_id=%s
                """,
                (
                    checked_in_at,
                    signature.image if signature else None,
                    signature.hash if signature else None,
                    shareholder_id,
                ),
            )

            if meeting_pk is not None and updated:
                cur.execute("UPDATE meetings SET checked_in = checked_in + 1 WHERE id=%s", (meeting_pk,))
            return updated

    def clear_check_in(self, shareholder_id: str, *, was_checked_in: bool) -> int:
        meeting_pk = _meeting_pk(self.meeting_id_for(shareholder_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE properties SET checked_in=FALSE WHERE shareholder_id=%s", (shareholder_id,))
            updated = int(cur.rowcount)

            cur.execute(
                """
                UPDATE shareholders
                SET checked_in_at=NULL, signature_image=NULL, signature_hash=NULL
                WHERE shareholder_id=%s
                """,
                (shareholder_id,),
            )

            if meeting_pk is not None and was_checked_in:
                cur.execute(
                    "UPDATE meetings SET checked_in = GREATEST(checked_in - 1, 0) WHERE id=%s",
                    (meeting_pk,),
                )
            return updated

    def reset_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE properties SET checked_in=FALSE WHERE checked_in=TRUE")
            updated = int(cur.rowcount)
            cur.execute(
                """
                UPDATE shareholders
                SET checked_in_at=NULL, signature_image=NULL, signature_hash=NULL
                WHERE checked_in_at IS NOT NULL OR signature_image IS NOT NULL OR signature_hash IS NOT NULL
                """
            )
            cur.execute("UPDATE meetings SET checked_in=0")
            return updated

    def meeting_counters(self, meeting_id: str) -> Optional[MeetingCounters]:
        meeting_pk = _meeting_pk(meeting_id)
        if meeting_pk is None:
            return None
        r = query_one(
            self._conn_factory,
            "SELECT id, total_shareholders, checked_in FROM meetings WHERE id=%s",
            (meeting_pk,),
        )
        if not r:
            return None
        return MeetingCounters(
            meeting_id=int(r["id"]),
            total_shareholders=int(r["total_shareholders"] or 0),
            checked_in=int(r["checked_in"] or 0),
        )
